# localfix/schemas/provider.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from localfix.schemas.base import CamelModel
from localfix.schemas.review import ReviewResponse
from localfix.schemas.user import UserSummary


class ProviderCreate(CamelModel):
    business_name: Optional[str] = None
    specialty: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: str = Field(..., min_length=1)
    service_radius: int = Field(25, ge=0)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    is_available: bool = True
    # category ids or category names; stored as ids
    categories: List[str] = Field(default_factory=list)
    years_experience: Optional[int] = Field(None, ge=0)
    profile_image: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)


# rating, reviewCount and isApproved are deliberately absent: unknown keys are dropped
class ProviderUpdate(CamelModel):
    business_name: Optional[str] = None
    specialty: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1)
    service_radius: Optional[int] = Field(None, ge=0)
    hourly_rate: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)
    is_available: Optional[bool] = None
    categories: Optional[List[str]] = None
    years_experience: Optional[int] = Field(None, ge=0)
    profile_image: Optional[str] = None
    certifications: Optional[List[str]] = None


class ApprovalUpdate(CamelModel):
    is_approved: bool


class ProviderResponse(CamelModel):
    id: str
    user_id: str
    business_name: Optional[str] = None
    specialty: str
    description: Optional[str] = None
    location: str
    service_radius: Optional[int] = None
    hourly_rate: Optional[Decimal] = None
    is_approved: bool
    is_available: bool
    rating: Decimal
    review_count: int
    categories: List[str] = Field(default_factory=list)
    years_experience: Optional[int] = None
    profile_image: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)
    created_at: datetime

    @field_validator("categories", mode="before")
    @classmethod
    def category_ids(cls, v):
        return [getattr(c, "id", c) for c in v or []]

    @field_validator("certifications", mode="before")
    @classmethod
    def default_certifications(cls, v):
        return v or []


class ProviderWithUser(ProviderResponse):
    user: Optional[UserSummary] = None


class ProviderDetail(ProviderWithUser):
    reviews: List[ReviewResponse] = Field(default_factory=list)


def provider_with_user(provider, user, with_email: bool = True, reviews=None):
    data = ProviderResponse.model_validate(provider).model_dump()
    summary = None
    if user is not None:
        summary = UserSummary(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email if with_email else None,
        )
    if reviews is None:
        return ProviderWithUser(**data, user=summary)
    return ProviderDetail(
        **data,
        user=summary,
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )
