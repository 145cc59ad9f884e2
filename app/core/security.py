"""Password hashing, JWT creation/verification and bearer token extraction."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from fastapi import Request

from app.core.config import settings

# Bcrypt cost factor (log2 rounds).
BCRYPT_ROUNDS = 12

# Min/max lengths for name, email and password validation.
NAME_MIN_LEN = 1
NAME_MAX_LEN = 100
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

BEARER_SCHEME = "bearer"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes verify as False."""
    if not plain_password or not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    sub: str | int,
    role: str,
    expires_delta: timedelta,
    name: str | None = None,
    email: str | None = None,
) -> tuple[str, datetime]:
    """Create a signed JWT; returns (token, expires_at)."""
    now = datetime.now(UTC)
    expire = now + expires_delta
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "exp": expire,
        "iat": now,
        # Unique per token so two tokens issued in the same second never collide.
        "jti": uuid.uuid4().hex,
    }
    if name is not None:
        payload["name"] = name
    if email is not None:
        payload["email"] = email
    secret = settings.JWT_SECRET.get_secret_value()
    token = jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )
    # JWT exp has one-second resolution; report what the token actually carries.
    return token, expire.replace(microsecond=0)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, role, exp, iat, ...).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )


def _split_bearer(value: str | None) -> tuple[bool, str | None]:
    """Return (has_bearer_scheme, credentials). The scheme matches case-insensitively."""
    if not value:
        return False, None
    scheme, _, credentials = value.strip().partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        return True, credentials.strip() or None
    return False, value.strip() or None


def extract_token(request: Request) -> str | None:
    """
    Return the bearer token carried by the request, or None.

    Authorization: Bearer <token> wins over the session cookie. Never raises.
    """
    is_bearer, token = _split_bearer(request.headers.get("Authorization"))
    if is_bearer and token:
        return token
    _, cookie_token = _split_bearer(request.cookies.get(settings.AUTH_COOKIE_NAME))
    return cookie_token
