# localfix/core/errors.py
"""
Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``localfix.main`` turn
them into ``{"message": ...}`` JSON bodies with the matching status code.
"""
from typing import Any, Dict, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, **extra: Any):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"message": self.message}
        body.update(self.extra)
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid data"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class EmailTaken(Conflict):
    status_code = 400
    default_message = "User already exists with this email"


class InvalidTransition(AppError):
    status_code = 400
    default_message = "Invalid status transition"
