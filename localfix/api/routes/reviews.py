# localfix/api/routes/reviews.py
from typing import List

from fastapi import APIRouter, Depends, status

from localfix.api.deps import get_current_actor, get_storage
from localfix.core.security import Actor
from localfix.repositories.base import Storage
from localfix.schemas.review import ReviewCreate, ReviewResponse
from localfix.services.review_service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


def get_review_service(storage: Storage = Depends(get_storage)) -> ReviewService:
    return ReviewService(storage)


# Create review (customer who owns the completed booking)
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    actor: Actor = Depends(get_current_actor),
    service: ReviewService = Depends(get_review_service),
):
    return service.create(actor, data)


# List visible reviews for a provider (public)
@router.get("/provider/{provider_id}", response_model=List[ReviewResponse])
def list_provider_reviews(provider_id: str, service: ReviewService = Depends(get_review_service)):
    return service.list_for_provider(provider_id)
