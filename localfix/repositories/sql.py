# localfix/repositories/sql.py
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from localfix.db.models.auth_session import AuthSession
from localfix.db.models.booking import Booking
from localfix.db.models.category import Category
from localfix.db.models.provider import Provider
from localfix.db.models.review import Review
from localfix.db.models.user import User
from localfix.repositories.base import Storage

logger = logging.getLogger(__name__)


class SqlStorage(Storage):
    """Relational storage on top of one SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
            if self._depth == 1:
                self.db.commit()
        except Exception:
            if self._depth == 1:
                self.db.rollback()
            raise
        finally:
            self._depth -= 1

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    def _apply(self, obj, updates: dict):
        for field, value in updates.items():
            setattr(obj, field, value)
        self.db.flush()
        return obj

    # --- users ---

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_users(self, role: Optional[str] = None) -> List[User]:
        q = self.db.query(User)
        if role:
            q = q.filter(User.role == role)
        return q.order_by(User.created_at.desc()).all()

    def create_user(self, **fields) -> User:
        return self._add(User(**fields))

    def update_user(self, user: User, **updates) -> User:
        return self._apply(user, updates)

    # --- categories ---

    def list_categories(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def get_category(self, category_id: str) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def create_category(self, **fields) -> Category:
        return self._add(Category(**fields))

    # --- providers ---

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self.db.get(Provider, provider_id)

    def get_provider_by_user(self, user_id: str) -> Optional[Provider]:
        return self.db.query(Provider).filter(Provider.user_id == user_id).first()

    def list_providers(
        self,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> List[Provider]:
        q = self.db.query(Provider)
        if is_approved is not None:
            q = q.filter(Provider.is_approved == is_approved)
        if location:
            q = q.filter(func.lower(Provider.location).contains(location.lower(), autoescape=True))
        if category_id:
            q = q.filter(Provider.categories.any(Category.id == category_id))
        return q.order_by(Provider.created_at.desc()).all()

    def create_provider(self, categories: List[Category], **fields) -> Provider:
        provider = Provider(**fields)
        provider.categories = list(categories)
        return self._add(provider)

    def update_provider(self, provider: Provider, **updates) -> Provider:
        return self._apply(provider, updates)

    def lock_provider(self, provider_id: str) -> Optional[Provider]:
        # FOR UPDATE is ignored by SQLite, which serializes writers anyway
        return (
            self.db.query(Provider)
            .filter(Provider.id == provider_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    # --- bookings ---

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.db.get(Booking, booking_id)

    def lock_booking(self, booking_id: str) -> Optional[Booking]:
        # populate_existing refreshes a copy already sitting in the identity map
        return (
            self.db.query(Booking)
            .filter(Booking.id == booking_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def list_bookings(
        self,
        customer_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        q = self.db.query(Booking)
        if customer_id:
            q = q.filter(Booking.customer_id == customer_id)
        if provider_id:
            q = q.filter(Booking.provider_id == provider_id)
        if status:
            q = q.filter(Booking.status == status)
        return q.order_by(Booking.created_at.desc()).all()

    def create_booking(self, **fields) -> Booking:
        return self._add(Booking(**fields))

    def update_booking(self, booking: Booking, **updates) -> Booking:
        return self._apply(booking, updates)

    # --- reviews ---

    def get_review(self, review_id: str) -> Optional[Review]:
        return self.db.get(Review, review_id)

    def get_review_for_booking(self, booking_id: str) -> Optional[Review]:
        return self.db.query(Review).filter(Review.booking_id == booking_id).first()

    def list_reviews(self, provider_id: str, visible_only: bool = True) -> List[Review]:
        q = self.db.query(Review).filter(Review.provider_id == provider_id)
        if visible_only:
            q = q.filter(Review.is_visible.is_(True))
        return q.order_by(Review.created_at.desc()).all()

    def create_review(self, **fields) -> Review:
        return self._add(Review(**fields))

    def update_review(self, review: Review, **updates) -> Review:
        return self._apply(review, updates)

    def delete_review(self, review: Review) -> None:
        self.db.delete(review)
        self.db.flush()

    def review_stats(self, provider_id: str) -> Tuple[int, Optional[float]]:
        count, avg = (
            self.db.query(func.count(Review.id), func.avg(Review.rating))
            .filter(Review.provider_id == provider_id, Review.is_visible.is_(True))
            .one()
        )
        return int(count or 0), (float(avg) if avg is not None else None)

    # --- sessions ---

    def create_session(self, **fields) -> AuthSession:
        return self._add(AuthSession(**fields))

    def get_session(self, token: str) -> Optional[AuthSession]:
        return self.db.get(AuthSession, token)

    def delete_session(self, token: str) -> None:
        session = self.db.get(AuthSession, token)
        if session is not None:
            self.db.delete(session)
            self.db.flush()

    def purge_expired_sessions(self, now: datetime) -> int:
        removed = self.db.query(AuthSession).filter(AuthSession.expires_at <= now).delete()
        self.db.flush()
        return int(removed or 0)
