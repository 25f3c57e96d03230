# tests/conftest.py
import os

# settings are read at import time, so they must be in place before localfix is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_PASSWORD"] = "test-admin-secret"
os.environ["ADMIN_EMAIL"] = "admin@localfix.com"
os.environ["SEED_ON_STARTUP"] = "true"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from localfix.core.security import Actor, hash_password  # noqa: E402
from localfix.db.base import Base, SessionLocal, engine, init_db  # noqa: E402
from localfix.db.models.user import UserRole  # noqa: E402
from localfix.db.seed import seed_categories  # noqa: E402
from localfix.repositories.sql import SqlStorage  # noqa: E402
from memory_storage import MemoryStorage  # noqa: E402

ADMIN_SECRET = "test-admin-secret"


def reset_database():
    Base.metadata.drop_all(bind=engine)
    init_db(engine)


@pytest.fixture(params=["sql", "memory"])
def storage(request):
    """Every service test runs against both storage implementations."""
    if request.param == "memory":
        yield MemoryStorage()
        return
    reset_database()
    db = SessionLocal()
    try:
        yield SqlStorage(db)
    finally:
        db.close()


@pytest.fixture
def sql_storages():
    """Independent SqlStorage sessions over one fresh database, for interleaving requests."""
    reset_database()
    opened = []

    def _open():
        db = SessionLocal()
        opened.append(db)
        return SqlStorage(db)

    yield _open
    for db in opened:
        db.close()


@pytest.fixture
def categories(storage):
    seed_categories(storage)
    return {c.name: c for c in storage.list_categories()}


@pytest.fixture
def make_user(storage):
    def _make(email, role=UserRole.customer.value, password="secret1", first_name="Test", last_name="User"):
        with storage.atomic():
            user = storage.create_user(
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
        return user

    return _make


@pytest.fixture
def make_provider(storage, make_user):
    """A user with the provider role and a provider profile (approved unless told otherwise)."""

    def _make(email, approved=True, hourly_rate=Decimal("50.00"), location="Springfield", categories=()):
        user = make_user(email, role=UserRole.provider.value)
        with storage.atomic():
            provider = storage.create_provider(
                categories=list(categories),
                user_id=user.id,
                specialty="Electrician",
                location=location,
                hourly_rate=hourly_rate,
                is_approved=approved,
                rating=Decimal("0.00"),
                review_count=0,
            )
        return provider, Actor.from_user(user)

    return _make


@pytest.fixture
def customer(make_user):
    return Actor.from_user(make_user("alice@x.com"))


@pytest.fixture
def admin(make_user):
    return Actor.from_user(make_user("admin@localfix.com", role=UserRole.admin.value))


# --- API ---


@pytest.fixture
def app():
    from localfix.main import app as application

    reset_database()
    return application


@pytest.fixture
def client(app):
    # entering the context runs startup: tables, seed data, session purge
    with TestClient(app) as c:
        yield c


@pytest.fixture
def new_client(app, client):
    """Extra clients with their own cookie jars, sharing the started app."""
    clients = []

    def _new():
        c = TestClient(app)
        clients.append(c)
        return c

    yield _new
    for c in clients:
        c.close()


def _register(c, email, password="secret1", first_name="Test", last_name="User"):
    resp = c.post(
        "/api/auth/register",
        json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def register():
    """Register through the API; the client keeps the session cookie."""
    return _register


@pytest.fixture
def admin_client(new_client):
    c = new_client()
    resp = c.post("/api/auth/admin-login", json={"password": ADMIN_SECRET})
    assert resp.status_code == 200, resp.text
    return c
