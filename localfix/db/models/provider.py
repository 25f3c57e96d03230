# localfix/db/models/provider.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Table
from sqlalchemy.orm import relationship

from localfix.db.base import Base
from localfix.db.models.user import new_id

# categories are stored by canonical category id only
provider_categories = Table(
    "provider_categories",
    Base.metadata,
    Column("provider_id", String(36), ForeignKey("providers.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", String(36), ForeignKey("service_categories.id", ondelete="CASCADE"), primary_key=True),
)


class Provider(Base):
    __tablename__ = "providers"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True, index=True)

    business_name = Column(String, nullable=True)
    specialty = Column(String, nullable=False)
    description = Column(String, nullable=True)
    location = Column(String, nullable=False)
    service_radius = Column(Integer, default=25)  # miles
    hourly_rate = Column(Numeric(8, 2), nullable=True)
    years_experience = Column(Integer, nullable=True)
    profile_image = Column(String, nullable=True)
    certifications = Column(JSON, default=list)

    # only an admin flips is_approved; only the owner flips is_available
    is_approved = Column(Boolean, default=False, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    # maintained by the review ledger, never by client patches
    rating = Column(Numeric(3, 2), default=Decimal("0.00"), nullable=False)
    review_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    categories = relationship("Category", secondary=provider_categories, lazy="selectin")

    @property
    def category_ids(self) -> list:
        return [c.id for c in self.categories]
