# localfix/services/review_service.py
"""
Review ledger.

A provider's ``rating`` and ``review_count`` always describe its visible
reviews: every write that changes that set (create, delete, visibility
toggle) recomputes both while holding a lock on the provider row, in the
same transaction as the review write itself.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from localfix.core.errors import Conflict, Forbidden, NotFound, ValidationError
from localfix.core.security import Actor, ensure_admin
from localfix.db.models.booking import BookingStatus
from localfix.db.models.provider import Provider
from localfix.db.models.review import Review
from localfix.repositories.base import Storage
from localfix.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


def round_rating(mean) -> Decimal:
    return Decimal(str(mean)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class ReviewService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def _recompute(self, provider_id: str) -> Provider:
        provider = self.storage.lock_provider(provider_id)
        if provider is None:
            raise NotFound("Provider not found")
        count, mean = self.storage.review_stats(provider_id)
        rating = round_rating(mean) if count else Decimal("0.00")
        return self.storage.update_provider(provider, rating=rating, review_count=count)

    def create(self, actor: Actor, data: ReviewCreate) -> Review:
        booking = self.storage.get_booking(data.booking_id)
        if booking is None or booking.customer_id != actor.id:
            logger.warning("Actor %s may not review booking %s", actor.id, data.booking_id)
            raise Forbidden("Not authorized")
        if booking.status != BookingStatus.completed.value:
            raise ValidationError("Only completed bookings can be reviewed")
        if data.provider_id and data.provider_id != booking.provider_id:
            raise ValidationError("Provider does not match the booking")
        if self.storage.get_review_for_booking(booking.id):
            raise Conflict("This booking has already been reviewed")

        with self.storage.atomic():
            review = self.storage.create_review(
                booking_id=booking.id,
                customer_id=actor.id,
                provider_id=booking.provider_id,
                rating=data.rating,
                comment=data.comment,
                is_visible=True,
            )
            provider = self._recompute(booking.provider_id)

        logger.info(
            "Review %s for provider %s; rating now %s over %d reviews",
            review.id,
            provider.id,
            provider.rating,
            provider.review_count,
        )
        return review

    def list_for_provider(self, provider_id: str) -> List[Review]:
        return self.storage.list_reviews(provider_id, visible_only=True)

    def _get(self, review_id: str) -> Review:
        review = self.storage.get_review(review_id)
        if review is None:
            raise NotFound("Review not found")
        return review

    def delete(self, actor: Actor, review_id: str) -> None:
        ensure_admin(actor)
        review = self._get(review_id)
        provider_id = review.provider_id
        with self.storage.atomic():
            self.storage.delete_review(review)
            self._recompute(provider_id)
        logger.info("Review %s deleted by %s", review_id, actor.id)

    def set_visibility(self, actor: Actor, review_id: str, is_visible: bool) -> Review:
        ensure_admin(actor)
        review = self._get(review_id)
        with self.storage.atomic():
            review = self.storage.update_review(review, is_visible=bool(is_visible))
            self._recompute(review.provider_id)
        logger.info("Review %s visibility set to %s by %s", review.id, review.is_visible, actor.id)
        return review
