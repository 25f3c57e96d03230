# localfix/services/auth_service.py
import logging
from typing import Tuple

from localfix.core.config import ADMIN_EMAIL
from localfix.core.errors import AppError, EmailTaken, InvalidCredentials, NotFound
from localfix.core.security import Actor, check_admin_secret, hash_password, verify_password
from localfix.core.sessions import SessionStore
from localfix.db.models.auth_session import AuthSession
from localfix.db.models.user import User, UserRole
from localfix.repositories.base import Storage
from localfix.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    """Account store operations plus session bookkeeping for login/logout."""

    def __init__(self, storage: Storage, sessions: SessionStore):
        self.storage = storage
        self.sessions = sessions

    def register(self, data: UserCreate) -> Tuple[User, AuthSession]:
        if self.storage.get_user_by_email(data.email):
            raise EmailTaken()

        with self.storage.atomic():
            # self-registration always yields a customer
            user = self.storage.create_user(
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                role=UserRole.customer.value,
            )
            session = self.sessions.open(user.id)
        logger.info("Registered user %s", user.id)
        return user, session

    def login(self, email: str, password: str) -> Tuple[User, AuthSession]:
        user = self.storage.get_user_by_email(email)
        # unknown email and wrong password are indistinguishable to the caller
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()
        return user, self.sessions.open(user.id)

    def admin_login(self, password: str) -> Tuple[User, AuthSession]:
        if not check_admin_secret(password):
            logger.warning("Failed admin login attempt")
            raise InvalidCredentials("Invalid admin password")
        admin = self.storage.get_user_by_email(ADMIN_EMAIL)
        if admin is None or admin.role != UserRole.admin.value:
            logger.error("Seeded admin account %s is missing", ADMIN_EMAIL)
            raise AppError("Admin user not found", status_code=500)
        return admin, self.sessions.open(admin.id)

    def logout(self, token: str) -> None:
        self.sessions.close(token)

    def me(self, actor: Actor) -> User:
        user = self.storage.get_user(actor.id)
        if user is None:
            raise NotFound("User not found")
        return user
