# localfix/api/routes/bookings.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from localfix.api.deps import get_current_actor, get_storage
from localfix.core.security import Actor
from localfix.db.models.booking import BookingStatus
from localfix.repositories.base import Storage
from localfix.schemas.booking import BookingCreate, BookingResponse, BookingUpdate, BookingWithDetails
from localfix.services.booking_service import BookingService

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


def get_booking_service(storage: Storage = Depends(get_storage)) -> BookingService:
    return BookingService(storage)


# Customers see their own bookings, providers the bookings made with them, admins all
@router.get("", response_model=List[BookingWithDetails])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.list(actor, status=status_filter.value if status_filter else None)
    return service.with_details(bookings)


@router.get("/{booking_id}", response_model=BookingWithDetails)
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get(actor, booking_id)
    return service.with_details([booking])[0]


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    actor: Actor = Depends(get_current_actor),
    service: BookingService = Depends(get_booking_service),
):
    return service.create(actor, data)


# Status changes follow pending -> confirmed -> completed, with cancel from either open state
@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: str,
    patch: BookingUpdate,
    actor: Actor = Depends(get_current_actor),
    service: BookingService = Depends(get_booking_service),
):
    return service.update(actor, booking_id, patch)
