# localfix/api/routes/auth.py
from fastapi import APIRouter, Depends, Request, Response

from localfix.api.deps import get_current_actor, get_sessions, get_storage
from localfix.core.config import COOKIE_SECURE, SESSION_COOKIE_NAME
from localfix.core.security import Actor
from localfix.core.sessions import SessionStore
from localfix.db.models.auth_session import AuthSession
from localfix.repositories.base import Storage
from localfix.schemas.base import MessageResponse
from localfix.schemas.user import AdminLoginRequest, LoginRequest, UserCreate, UserResponse
from localfix.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_sessions),
) -> AuthService:
    return AuthService(storage, sessions)


def _set_session_cookie(response: Response, session: AuthSession, sessions: SessionStore) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.token,
        max_age=int(sessions.ttl.total_seconds()),
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse)
def register(data: UserCreate, response: Response, service: AuthService = Depends(get_auth_service)):
    user, session = service.register(data)
    _set_session_cookie(response, session, service.sessions)
    return user


@router.post("/login", response_model=UserResponse)
def login(data: LoginRequest, response: Response, service: AuthService = Depends(get_auth_service)):
    user, session = service.login(data.email, data.password)
    _set_session_cookie(response, session, service.sessions)
    return user


# Shared-secret admin login; always resolves to the seeded admin account
@router.post("/admin-login", response_model=UserResponse)
def admin_login(data: AdminLoginRequest, response: Response, service: AuthService = Depends(get_auth_service)):
    admin, session = service.admin_login(data.password)
    _set_session_cookie(response, session, service.sessions)
    return admin


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, service: AuthService = Depends(get_auth_service)):
    service.logout(request.cookies.get(SESSION_COOKIE_NAME))
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def me(actor: Actor = Depends(get_current_actor), service: AuthService = Depends(get_auth_service)):
    return service.me(actor)
