"""Password hashing and JWT issuing for workforce accounts."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt

from workforce.core.config import get_settings

settings = get_settings()

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Checks a password against a stored bcrypt hash.

    Used at login and to confirm a team leader's password before an agent reset.
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # not a bcrypt hash (e.g. an account imported without a password)
        return False


def _sign(claims: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    payload = {**claims, "type": token_type, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _sign(data, ACCESS_TOKEN, lifetime)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _sign(data, REFRESH_TOKEN, lifetime)


def issue_token_pair(user_id: int, username: str, role: str) -> dict[str, Any]:
    """Login/refresh response body: access token with role claims plus a bare refresh token."""
    return {
        "access_token": create_access_token({"sub": str(user_id), "username": username, "role": role}),
        "refresh_token": create_refresh_token({"sub": str(user_id)}),
        "token_type": "bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
    }


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> Optional[dict]:
    """Payload of a valid, unexpired token of ``expected_type``; None otherwise."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    return payload if payload.get("type") == expected_type else None
