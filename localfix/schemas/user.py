# localfix/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator
from pydantic.networks import validate_email

from localfix.schemas.base import CamelModel


class _EmailInput(CamelModel):
    # emails are case-sensitive keys: checked for shape, stored exactly as sent
    email: str

    @field_validator("email")
    @classmethod
    def well_formed_email(cls, v: str) -> str:
        validate_email(v)
        return v


class UserCreate(_EmailInput):
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None


class LoginRequest(_EmailInput):
    password: str = Field(..., min_length=1)


class AdminLoginRequest(CamelModel):
    password: str


# password_hash is never part of any response model
class UserResponse(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: str
    created_at: datetime


class UserSummary(CamelModel):
    first_name: str
    last_name: str
    email: Optional[str] = None
