# localfix/db/base.py
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from localfix.core.config import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)


def build_engine(url: str = DATABASE_URL):
    kwargs = {"echo": DB_ECHO, "future": True}
    if url.startswith("sqlite"):
        # FastAPI runs sync routes in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    # models must be imported so their tables are registered on Base.metadata
    from localfix.db.models import (  # noqa: F401
        auth_session,
        booking,
        category,
        provider,
        review,
        user,
    )

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)
    logger.info("Database tables ensured")
