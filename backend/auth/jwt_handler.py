from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config


def create_session_token(
    subject: str,
    admin_id: int,
    name: str | None = None,
    expires_hours: int | None = None,
) -> str:
    expire_hours = expires_hours or config.ADMIN_SESSION_HOURS
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "admin_id": admin_id,
        "name": name,
        "exp": issued_at + timedelta(hours=expire_hours),
        "iat": issued_at,
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """Raises ``jwt.ExpiredSignatureError`` once the ``exp`` claim has passed."""
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
