# localfix/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from localfix.core.config import SESSION_COOKIE_NAME
from localfix.core.security import Actor, ensure_admin, ensure_provider
from localfix.core.sessions import SessionStore
from localfix.db.base import get_db
from localfix.repositories.base import Storage
from localfix.repositories.sql import SqlStorage


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return SqlStorage(db)


def get_sessions(storage: Storage = Depends(get_storage)) -> SessionStore:
    return SessionStore(storage)


def get_current_actor(request: Request, sessions: SessionStore = Depends(get_sessions)) -> Actor:
    return sessions.resolve_actor(request.cookies.get(SESSION_COOKIE_NAME))


def require_provider(actor: Actor = Depends(get_current_actor)) -> Actor:
    return ensure_provider(actor)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    return ensure_admin(actor)
