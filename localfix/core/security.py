# localfix/core/security.py
"""
Password hashing and the actor model used for authorization checks.

Passwords are hashed with bcrypt through passlib's ``CryptContext``.  An
``Actor`` is the identity resolved from a session: the user id plus the
role currently stored on the user record (never a role cached in the
session itself, so a promotion to provider takes effect immediately).
"""
import hmac
import logging
from dataclasses import dataclass

from passlib.context import CryptContext

from localfix.core.config import ADMIN_PASSWORD, BCRYPT_ROUNDS
from localfix.core.errors import Forbidden
from localfix.db.models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # malformed or foreign hash
        logger.warning("Stored password hash could not be verified")
        return False


def check_admin_secret(candidate: str) -> bool:
    return hmac.compare_digest(candidate.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8"))


@dataclass(frozen=True)
class Actor:
    id: str
    role: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role, email=user.email)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin.value

    @property
    def is_provider(self) -> bool:
        return self.role == UserRole.provider.value


def ensure_provider(actor: Actor) -> Actor:
    if not actor.is_provider:
        raise Forbidden("Provider access required")
    return actor


def ensure_admin(actor: Actor) -> Actor:
    if not actor.is_admin:
        raise Forbidden("Admin access required")
    return actor
