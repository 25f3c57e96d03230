# localfix/repositories/base.py
"""
Persistence port.

Services talk to a ``Storage`` and never to a SQLAlchemy session directly,
so the relational implementation (``SqlStorage``) can be swapped for an
in-memory one.  Entities are the ORM classes from ``localfix.db.models``;
an in-memory implementation uses them as plain transient objects.

Writes are flushed immediately but only become durable when the
outermost ``atomic()`` block exits without an exception.
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from localfix.db.models.auth_session import AuthSession
from localfix.db.models.booking import Booking
from localfix.db.models.category import Category
from localfix.db.models.provider import Provider
from localfix.db.models.review import Review
from localfix.db.models.user import User


class Storage(ABC):
    # --- transactions ---

    @abstractmethod
    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed writes as one unit: all of them or none."""

    # --- users ---

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def list_users(self, role: Optional[str] = None) -> List[User]: ...

    @abstractmethod
    def create_user(self, **fields) -> User: ...

    @abstractmethod
    def update_user(self, user: User, **updates) -> User: ...

    # --- categories ---

    @abstractmethod
    def list_categories(self) -> List[Category]: ...

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]: ...

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]: ...

    @abstractmethod
    def create_category(self, **fields) -> Category: ...

    # --- providers ---

    @abstractmethod
    def get_provider(self, provider_id: str) -> Optional[Provider]: ...

    @abstractmethod
    def get_provider_by_user(self, user_id: str) -> Optional[Provider]: ...

    @abstractmethod
    def list_providers(
        self,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> List[Provider]:
        """All providers matching every supplied filter (AND).

        ``category_id`` is set membership, ``location`` a case-insensitive
        substring match, ``is_approved`` an exact match.
        """

    @abstractmethod
    def create_provider(self, categories: List[Category], **fields) -> Provider: ...

    @abstractmethod
    def update_provider(self, provider: Provider, **updates) -> Provider:
        """Apply ``updates``; a ``categories`` key replaces the category set."""

    @abstractmethod
    def lock_provider(self, provider_id: str) -> Optional[Provider]:
        """Load a provider for update, serializing concurrent aggregate writes."""

    # --- bookings ---

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Booking]: ...

    @abstractmethod
    def lock_booking(self, booking_id: str) -> Optional[Booking]:
        """Load the current committed booking row for update, serializing status changes."""

    @abstractmethod
    def list_bookings(
        self,
        customer_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings matching every supplied filter, most recent first."""

    @abstractmethod
    def create_booking(self, **fields) -> Booking: ...

    @abstractmethod
    def update_booking(self, booking: Booking, **updates) -> Booking: ...

    # --- reviews ---

    @abstractmethod
    def get_review(self, review_id: str) -> Optional[Review]: ...

    @abstractmethod
    def get_review_for_booking(self, booking_id: str) -> Optional[Review]: ...

    @abstractmethod
    def list_reviews(self, provider_id: str, visible_only: bool = True) -> List[Review]:
        """Reviews of a provider, most recent first."""

    @abstractmethod
    def create_review(self, **fields) -> Review: ...

    @abstractmethod
    def update_review(self, review: Review, **updates) -> Review: ...

    @abstractmethod
    def delete_review(self, review: Review) -> None: ...

    @abstractmethod
    def review_stats(self, provider_id: str) -> Tuple[int, Optional[float]]:
        """(count, mean rating) over the provider's visible reviews; mean is None when count is 0."""

    # --- sessions ---

    @abstractmethod
    def create_session(self, **fields) -> AuthSession: ...

    @abstractmethod
    def get_session(self, token: str) -> Optional[AuthSession]: ...

    @abstractmethod
    def delete_session(self, token: str) -> None: ...

    @abstractmethod
    def purge_expired_sessions(self, now: datetime) -> int: ...
