# localfix/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import Field, conint

from localfix.schemas.base import CamelModel


class ReviewCreate(CamelModel):
    booking_id: str
    provider_id: Optional[str] = None
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = None


class ReviewVisibilityUpdate(CamelModel):
    is_visible: bool


class ReviewResponse(CamelModel):
    id: str
    booking_id: str
    customer_id: str
    provider_id: str
    rating: int
    comment: Optional[str] = None
    is_visible: bool
    created_at: datetime
