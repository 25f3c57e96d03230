# tests/test_auth_service.py
from datetime import datetime, timedelta

import pydantic
import pytest

from localfix.core.config import ADMIN_PASSWORD as ADMIN_SECRET
from localfix.core.errors import AppError, EmailTaken, InvalidCredentials, Unauthorized
from localfix.core.security import verify_password
from localfix.core.sessions import SessionStore
from localfix.db.seed import seed_admin
from localfix.schemas.user import UserCreate
from localfix.services.auth_service import AuthService


@pytest.fixture
def sessions(storage):
    return SessionStore(storage)


@pytest.fixture
def service(storage, sessions):
    return AuthService(storage, sessions)


def signup(service, email="alice@x.com", password="secret1"):
    return service.register(UserCreate(email=email, password=password, first_name="Alice", last_name="Smith"))


def test_register_creates_customer_with_hashed_password(service, sessions):
    user, session = signup(service)
    assert user.role == "customer"
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)
    assert sessions.resolve_actor(session.token).id == user.id


def test_register_rejects_taken_email(service):
    signup(service)
    with pytest.raises(EmailTaken) as exc:
        signup(service, password="other")
    assert exc.value.status_code == 400
    assert exc.value.message == "User already exists with this email"


def test_login(service):
    user, _ = signup(service)
    logged_in, session = service.login("alice@x.com", "secret1")
    assert logged_in.id == user.id
    assert session.token


@pytest.mark.parametrize("email, password", [("alice@x.com", "wrong"), ("nobody@x.com", "secret1")])
def test_login_failures_look_the_same(service, email, password):
    signup(service)
    with pytest.raises(InvalidCredentials) as exc:
        service.login(email, password)
    assert exc.value.message == "Invalid credentials"


def test_admin_login_resolves_seeded_admin(service, storage):
    admin = seed_admin(storage)
    before = len(storage.list_users())

    for _ in range(2):
        user, _session = service.admin_login(ADMIN_SECRET)
        assert user.id == admin.id
        assert user.role == "admin"

    assert len(storage.list_users()) == before


def test_admin_login_wrong_secret(service, storage):
    seed_admin(storage)
    with pytest.raises(InvalidCredentials) as exc:
        service.admin_login("guess")
    assert exc.value.message == "Invalid admin password"


def test_admin_login_without_seeded_admin(service, storage):
    with pytest.raises(AppError) as exc:
        service.admin_login(ADMIN_SECRET)
    assert exc.value.status_code == 500
    assert storage.list_users() == []


def test_logout_ends_session(service, sessions):
    _, session = signup(service)
    service.logout(session.token)
    with pytest.raises(Unauthorized):
        sessions.resolve_actor(session.token)


def test_missing_token_is_unauthorized(sessions):
    with pytest.raises(Unauthorized):
        sessions.resolve_actor(None)
    with pytest.raises(Unauthorized):
        sessions.resolve_actor("not-a-token")


def test_expired_session_is_removed(storage, service):
    _, session = signup(service)
    token = session.token
    with storage.atomic():
        storage.create_session(
            token="stale",
            user_id=storage.get_session(token).user_id,
            created_at=datetime.utcnow() - timedelta(days=2),
            expires_at=datetime.utcnow() - timedelta(days=1),
        )

    with pytest.raises(Unauthorized) as exc:
        SessionStore(storage).resolve_actor("stale")
    assert exc.value.message == "Session expired"
    assert storage.get_session("stale") is None
    assert storage.get_session(token) is not None


def test_purge_expired(storage, sessions, service):
    user, live = signup(service)
    live_token = live.token
    short = SessionStore(storage, ttl=timedelta(seconds=-1))
    short.open(user.id)

    assert sessions.purge_expired() == 1
    assert storage.get_session(live_token) is not None


def test_role_is_read_from_the_user_record(storage, service, sessions):
    user, session = signup(service)
    with storage.atomic():
        storage.update_user(user, role="provider")
    assert sessions.resolve_actor(session.token).is_provider


def test_email_is_stored_exactly_as_sent(service, storage):
    mixed, _ = signup(service, email="Bob@Example.COM")
    assert mixed.email == "Bob@Example.COM"

    # a different spelling is a different account
    lower, _ = signup(service, email="Bob@example.com")
    assert lower.id != mixed.id

    assert service.login("Bob@Example.COM", "secret1")[0].id == mixed.id
    with pytest.raises(InvalidCredentials):
        service.login("bob@example.com", "secret1")


def test_malformed_email_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        UserCreate(email="not-an-email", password="x", first_name="A", last_name="B")
