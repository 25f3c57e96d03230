# localfix/db/models/booking.py
import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String

from localfix.db.base import Base
from localfix.db.models.user import new_id


class BookingStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


# completed and cancelled are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.pending: {BookingStatus.confirmed, BookingStatus.cancelled},
    BookingStatus.confirmed: {BookingStatus.completed, BookingStatus.cancelled},
    BookingStatus.completed: set(),
    BookingStatus.cancelled: set(),
}


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)

    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(String(36), ForeignKey("providers.id"), nullable=False, index=True)

    service_description = Column(String, nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    scheduled_time = Column(String, nullable=False, default="09:00")  # free text "HH:MM"

    status = Column(String, nullable=False, default=BookingStatus.pending.value)

    customer_address = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    estimated_duration = Column(Integer, nullable=False, default=2)  # hours
    estimated_cost = Column(Numeric(8, 2), nullable=True)
    notes = Column(String, nullable=True, default="")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
