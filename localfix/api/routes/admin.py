# localfix/api/routes/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from localfix.api.deps import get_storage, require_admin
from localfix.core.security import Actor
from localfix.db.models.booking import BookingStatus
from localfix.db.models.user import UserRole
from localfix.repositories.base import Storage
from localfix.schemas.base import MessageResponse
from localfix.schemas.booking import BookingWithDetails
from localfix.schemas.provider import ApprovalUpdate, ProviderResponse, ProviderWithUser
from localfix.schemas.review import ReviewResponse, ReviewVisibilityUpdate
from localfix.schemas.user import UserResponse
from localfix.services.booking_service import BookingService
from localfix.services.provider_service import ProviderService
from localfix.services.review_service import ReviewService

router = APIRouter(prefix="/api/admin", tags=["admin"])


# -------------------------
# Users
# -------------------------
@router.get("/users", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = Query(None, description="customer/provider/admin"),
    admin: Actor = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return storage.list_users(role=role.value if role else None)


# -------------------------
# Providers
# -------------------------
@router.get("/providers", response_model=List[ProviderWithUser])
def list_providers(admin: Actor = Depends(require_admin), storage: Storage = Depends(get_storage)):
    service = ProviderService(storage)
    return service.with_owner(service.list())


@router.put("/providers/{provider_id}/approve", response_model=ProviderResponse)
def approve_provider(
    provider_id: str,
    data: ApprovalUpdate,
    admin: Actor = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return ProviderService(storage).approve(admin, provider_id, data.is_approved)


# -------------------------
# Bookings
# -------------------------
@router.get("/bookings", response_model=List[BookingWithDetails])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    admin: Actor = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    service = BookingService(storage)
    bookings = service.list_all(admin, status=status_filter.value if status_filter else None)
    return service.with_details(bookings)


# -------------------------
# Reviews (moderation)
# -------------------------
@router.put("/reviews/{review_id}/visibility", response_model=ReviewResponse)
def set_review_visibility(
    review_id: str,
    data: ReviewVisibilityUpdate,
    admin: Actor = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return ReviewService(storage).set_visibility(admin, review_id, data.is_visible)


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str,
    admin: Actor = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    ReviewService(storage).delete(admin, review_id)
    return {"message": "Review deleted successfully"}
