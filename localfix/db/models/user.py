# localfix/db/models/user.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from localfix.db.base import Base


class UserRole(str, enum.Enum):
    customer = "customer"
    provider = "provider"
    admin = "admin"


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False, default=UserRole.customer.value, server_default=UserRole.customer.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
