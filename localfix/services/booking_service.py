# localfix/services/booking_service.py
"""
Booking ledger: creation, role-scoped listing and the status state machine.

Status moves only along ``ALLOWED_TRANSITIONS``; completed and cancelled
bookings accept no further changes.  Who may touch a booking depends on
the actor's relation to it:

- admin: any transition, any editable field
- customer (``booking.customer_id``): cancel, edit the visit details
- provider (owner of ``booking.provider_id``): confirm, complete, cancel,
  edit notes and duration
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from localfix.core.errors import Forbidden, InvalidTransition, NotFound, ValidationError
from localfix.core.security import Actor, ensure_admin
from localfix.db.models.booking import ALLOWED_TRANSITIONS, Booking, BookingStatus
from localfix.repositories.base import Storage
from localfix.schemas.booking import BookingCreate, BookingUpdate, BookingWithDetails, booking_with_details

logger = logging.getLogger(__name__)

ADMIN = "admin"
CUSTOMER = "customer"
PROVIDER = "provider"

DEFAULT_SCHEDULED_TIME = "09:00"
DEFAULT_DURATION_HOURS = 2

REQUIRED_ON_CREATE = (
    ("provider_id", "Provider ID is required"),
    ("service_description", "Service description is required"),
    ("scheduled_date", "Scheduled date is required"),
    ("customer_address", "Customer address is required"),
    ("customer_phone", "Customer phone is required"),
)

CUSTOMER_FIELDS = {
    "service_description",
    "scheduled_date",
    "scheduled_time",
    "customer_address",
    "customer_phone",
    "notes",
    "estimated_duration",
}
PROVIDER_FIELDS = {"notes", "estimated_duration"}

EDITABLE_FIELDS = {
    ADMIN: CUSTOMER_FIELDS | PROVIDER_FIELDS,
    CUSTOMER: CUSTOMER_FIELDS,
    PROVIDER: PROVIDER_FIELDS,
}

PERMITTED_STATUSES = {
    ADMIN: set(BookingStatus),
    CUSTOMER: {BookingStatus.cancelled},
    PROVIDER: {BookingStatus.confirmed, BookingStatus.completed, BookingStatus.cancelled},
}

NULLABLE_FIELDS = {"notes"}


def parse_scheduled_date(value: str) -> datetime:
    """Accept ISO dates and datetimes; aware values are stored as naive UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError("Invalid scheduled date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def estimate_cost(hourly_rate: Optional[Decimal], hours: int) -> Optional[Decimal]:
    if hourly_rate is None:
        return None
    return (Decimal(hourly_rate) * hours).quantize(Decimal("0.01"))


def is_terminal(status: BookingStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


class BookingService:
    def __init__(self, storage: Storage):
        self.storage = storage

    # ------------------------------------------------------------------
    # authorization helpers
    # ------------------------------------------------------------------
    def _relation(self, actor: Actor, booking: Booking) -> Optional[str]:
        if actor.is_admin:
            return ADMIN
        if booking.customer_id == actor.id:
            return CUSTOMER
        if actor.is_provider:
            provider = self.storage.get_provider_by_user(actor.id)
            if provider is not None and provider.id == booking.provider_id:
                return PROVIDER
        return None

    def _get_for(self, actor: Actor, booking_id: str, lock: bool = False):
        load = self.storage.lock_booking if lock else self.storage.get_booking
        booking = load(booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        relation = self._relation(actor, booking)
        if relation is None:
            logger.warning("Actor %s denied access to booking %s", actor.id, booking_id)
            raise Forbidden("Not authorized")
        return booking, relation

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def create(self, actor: Actor, data: BookingCreate) -> Booking:
        if actor.is_admin:
            raise Forbidden("Admins cannot create bookings")

        for field, message in REQUIRED_ON_CREATE:
            value = getattr(data, field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(message)

        provider = self.storage.get_provider(data.provider_id)
        if provider is None:
            raise NotFound("Provider not found")
        if not provider.is_approved:
            logger.warning("Booking rejected: provider %s is not approved", provider.id)
            raise ValidationError("Provider is not approved")
        if provider.user_id == actor.id:
            raise ValidationError("You cannot book your own provider profile")

        scheduled_date = parse_scheduled_date(data.scheduled_date)
        duration = data.estimated_duration or DEFAULT_DURATION_HOURS

        with self.storage.atomic():
            booking = self.storage.create_booking(
                customer_id=actor.id,
                provider_id=provider.id,
                service_description=data.service_description,
                scheduled_date=scheduled_date,
                scheduled_time=data.scheduled_time or DEFAULT_SCHEDULED_TIME,
                status=BookingStatus.pending.value,
                customer_address=data.customer_address,
                customer_phone=data.customer_phone,
                estimated_duration=duration,
                estimated_cost=estimate_cost(provider.hourly_rate, duration),
                notes=data.notes or "",
            )
        logger.info("Booking %s created by %s for provider %s", booking.id, actor.id, provider.id)
        return booking

    def get(self, actor: Actor, booking_id: str) -> Booking:
        booking, _ = self._get_for(actor, booking_id)
        return booking

    def list(self, actor: Actor, status: Optional[str] = None) -> List[Booking]:
        """Bookings visible to ``actor``: own as customer, own profile's as provider, all for admins."""
        if actor.is_admin:
            return self.storage.list_bookings(status=status)
        if actor.is_provider:
            provider = self.storage.get_provider_by_user(actor.id)
            if provider is None:
                return []
            return self.storage.list_bookings(provider_id=provider.id, status=status)
        return self.storage.list_bookings(customer_id=actor.id, status=status)

    def list_all(self, actor: Actor, status: Optional[str] = None) -> List[Booking]:
        ensure_admin(actor)
        return self.storage.list_bookings(status=status)

    def update(self, actor: Actor, booking_id: str, patch: BookingUpdate) -> Booking:
        updates = patch.model_dump(exclude_unset=True)
        target = updates.pop("status", None)

        # checks run against the locked, freshly read row
        with self.storage.atomic():
            booking, relation = self._get_for(actor, booking_id, lock=True)
            current = BookingStatus(booking.status)

            if is_terminal(current) and (updates or target is not None):
                raise InvalidTransition(f"Booking is {current.value} and can no longer be changed")

            denied = sorted(set(updates) - EDITABLE_FIELDS[relation])
            if denied:
                raise Forbidden(f"Not allowed to change: {', '.join(denied)}")

            if target is not None and target != current:
                if target not in PERMITTED_STATUSES[relation]:
                    raise Forbidden(f"Not allowed to set status to {target.value}")
                if target not in ALLOWED_TRANSITIONS[current]:
                    raise InvalidTransition(f"Cannot change booking status from {current.value} to {target.value}")
                updates["status"] = target.value

            for field, value in list(updates.items()):
                if value is None and field not in NULLABLE_FIELDS:
                    raise ValidationError(f"{field} cannot be empty")
            if "scheduled_date" in updates:
                updates["scheduled_date"] = parse_scheduled_date(updates["scheduled_date"])
            if "estimated_duration" in updates:
                provider = self.storage.get_provider(booking.provider_id)
                if provider is not None:
                    updates["estimated_cost"] = estimate_cost(provider.hourly_rate, updates["estimated_duration"])

            if not updates:
                return booking

            booking = self.storage.update_booking(booking, **updates)
        if "status" in updates:
            logger.info(
                "Booking %s status %s -> %s by %s (%s)", booking.id, current.value, booking.status, actor.id, relation
            )
        return booking

    # ------------------------------------------------------------------
    # response shaping
    # ------------------------------------------------------------------
    def with_details(self, bookings: List[Booking]) -> List[BookingWithDetails]:
        """Attach customer and provider summaries; never exposes secrets."""
        rows = []
        for booking in bookings:
            customer = self.storage.get_user(booking.customer_id)
            provider = self.storage.get_provider(booking.provider_id)
            provider_user = self.storage.get_user(provider.user_id) if provider is not None else None
            rows.append(booking_with_details(booking, customer, provider, provider_user))
        return rows
