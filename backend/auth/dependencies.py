import jwt
from fastapi import Request

from backend.auth import jwt_handler
from backend.core import config
from backend.core.errors import BookingError, BookingErrorKind


def read_admin_session(request: Request) -> dict | None:
    token = request.cookies.get(config.ADMIN_SESSION_COOKIE)
    if not token:
        return None
    try:
        payload = jwt_handler.decode_session_token(token)
    except jwt.PyJWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def require_admin_session(request: Request) -> dict:
    """Shared guard for every protected admin route.

    A missing, tampered or expired ``admin_session`` cookie is a 401 before
    any handler code runs.
    """
    payload = read_admin_session(request)
    if payload is None:
        raise BookingError(BookingErrorKind.UNAUTHORIZED, "Unauthorized")
    return payload
