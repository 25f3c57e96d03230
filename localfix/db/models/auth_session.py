# localfix/db/models/auth_session.py
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String

from localfix.db.base import Base


class AuthSession(Base):
    """Server-side login session; the cookie carries only ``token``."""

    __tablename__ = "sessions"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
