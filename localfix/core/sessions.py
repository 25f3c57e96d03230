# localfix/core/sessions.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from localfix.core.config import SESSION_TTL_HOURS
from localfix.core.errors import Unauthorized
from localfix.core.security import Actor
from localfix.db.models.auth_session import AuthSession
from localfix.repositories.base import Storage

logger = logging.getLogger(__name__)


class SessionStore:
    """Server-side sessions keyed by an opaque token; entries expire after ``ttl``."""

    def __init__(self, storage: Storage, ttl: timedelta = timedelta(hours=SESSION_TTL_HOURS)):
        self.storage = storage
        self.ttl = ttl

    def open(self, user_id: str) -> AuthSession:
        now = datetime.utcnow()
        with self.storage.atomic():
            return self.storage.create_session(
                token=secrets.token_urlsafe(32),
                user_id=user_id,
                created_at=now,
                expires_at=now + self.ttl,
            )

    def close(self, token: Optional[str]) -> None:
        if not token:
            return
        with self.storage.atomic():
            self.storage.delete_session(token)

    def resolve_actor(self, token: Optional[str]) -> Actor:
        """Map a session token to the acting user, or raise ``Unauthorized``."""
        if not token:
            raise Unauthorized()
        session = self.storage.get_session(token)
        if session is None:
            raise Unauthorized()
        if session.expires_at <= datetime.utcnow():
            self.close(token)
            raise Unauthorized("Session expired")
        user = self.storage.get_user(session.user_id)
        if user is None:
            raise Unauthorized("User no longer exists")
        return Actor.from_user(user)

    def purge_expired(self) -> int:
        with self.storage.atomic():
            removed = self.storage.purge_expired_sessions(datetime.utcnow())
        if removed:
            logger.info("Purged %d expired sessions", removed)
        return removed
