# localfix/schemas/booking.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from localfix.db.models.booking import BookingStatus
from localfix.schemas.base import CamelModel
from localfix.schemas.provider import ProviderWithUser, provider_with_user
from localfix.schemas.user import UserSummary


# --- CREATE ---
# Presence of the required fields is checked by the booking service so each
# missing field gets its own message; the model only fixes the types.
class BookingCreate(CamelModel):
    provider_id: Optional[str] = None
    service_description: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    customer_address: Optional[str] = None
    customer_phone: Optional[str] = None
    estimated_duration: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


# --- UPDATE (customer, provider or admin) ---
class BookingUpdate(CamelModel):
    status: Optional[BookingStatus] = Field(
        default=None,
        description="pending -> confirmed|cancelled, confirmed -> completed|cancelled",
    )
    service_description: Optional[str] = Field(None, min_length=1)
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    customer_address: Optional[str] = Field(None, min_length=1)
    customer_phone: Optional[str] = Field(None, min_length=1)
    estimated_duration: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None

    class Config(CamelModel.Config):
        extra = "forbid"


# --- RESPONSE ---
class BookingResponse(CamelModel):
    id: str
    customer_id: str
    provider_id: str
    service_description: str
    scheduled_date: datetime
    scheduled_time: str
    status: BookingStatus
    customer_address: str
    customer_phone: str
    estimated_duration: int
    estimated_cost: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class BookingWithDetails(BookingResponse):
    customer: Optional[UserSummary] = None
    provider: Optional[ProviderWithUser] = None


def booking_with_details(booking, customer, provider, provider_user) -> BookingWithDetails:
    data = BookingResponse.model_validate(booking).model_dump()
    return BookingWithDetails(
        **data,
        customer=UserSummary.model_validate(customer) if customer is not None else None,
        provider=provider_with_user(provider, provider_user, with_email=False) if provider is not None else None,
    )
