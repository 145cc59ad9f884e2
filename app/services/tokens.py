"""Persisted tokens: issue, rotate, invalidate and list active sessions."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from sqlalchemy.orm import Session

from app.core.security import create_access_token, decode_access_token
from app.models import AuthToken, Role, TokenType, User
from app.services.authorization import is_admin

logger = logging.getLogger(__name__)

# (access, refresh) lifetimes keyed by (is_admin, remember_me).
TOKEN_LIFETIMES: dict[tuple[bool, bool], tuple[timedelta, timedelta]] = {
    (False, False): (timedelta(days=1), timedelta(days=7)),
    (False, True): (timedelta(days=30), timedelta(days=90)),
    (True, False): (timedelta(days=30), timedelta(days=90)),
    (True, True): (timedelta(days=90), timedelta(days=180)),
}


class TokenError(Exception):
    """Raised when a refresh token cannot be exchanged for a new pair."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_expires: datetime
    refresh_expires: datetime


def as_utc(value: datetime) -> datetime:
    """Normalize to UTC; naive values (SQLite drops tzinfo on read) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def token_lifetimes(user: User, remember_me: bool = False) -> tuple[timedelta, timedelta]:
    """Access and refresh lifetimes for a user; admins and remembered logins live longer."""
    return TOKEN_LIFETIMES[(is_admin(user), bool(remember_me))]


def issue_token(
    db: Session,
    user: User,
    expires_delta: timedelta,
    token_type: TokenType = TokenType.AUTH,
    user_agent: str | None = None,
    commit: bool = True,
) -> AuthToken:
    """Sign a JWT for the user and persist it. Returns the stored row."""
    token, expires_at = create_access_token(
        sub=user.id,
        role=Role(user.role).value,
        expires_delta=expires_delta,
        name=user.name,
        email=user.email,
    )
    row = AuthToken(
        user_id=user.id,
        token=token,
        type=token_type,
        expires_at=expires_at,
        is_valid=True,
        user_agent=user_agent[:512] if user_agent else None,
        last_used_at=datetime.now(UTC),
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    logger.debug(
        "Token issued",
        extra={"user_id": user.id, "token_type": token_type.value},
    )
    return row


def create_token_pair(
    db: Session,
    user: User,
    user_agent: str | None = None,
    remember_me: bool = False,
) -> TokenPair:
    """Issue an access token and a refresh token in one transaction."""
    access_delta, refresh_delta = token_lifetimes(user, remember_me)
    access = issue_token(db, user, access_delta, TokenType.AUTH, user_agent, commit=False)
    refresh = issue_token(db, user, refresh_delta, TokenType.REFRESH, user_agent, commit=False)
    db.commit()
    return TokenPair(
        access_token=access.token,
        refresh_token=refresh.token,
        access_expires=as_utc(access.expires_at),
        refresh_expires=as_utc(refresh.expires_at),
    )


def find_active_token(
    db: Session,
    token: str,
    token_type: TokenType = TokenType.AUTH,
) -> AuthToken | None:
    """
    Return the valid, unexpired row for token, or None.
    A row found past its expiry is marked invalid.
    """
    row = (
        db.query(AuthToken)
        .filter(
            AuthToken.token == token,
            AuthToken.type == token_type,
            AuthToken.is_valid.is_(True),
        )
        .first()
    )
    if row is None:
        return None
    if as_utc(row.expires_at) <= datetime.now(UTC):
        row.is_valid = False
        db.commit()
        logger.info("Expired token invalidated", extra={"token_id": row.id})
        return None
    return row


def touch_token(db: Session, row: AuthToken) -> None:
    """Record that the token was just used."""
    row.last_used_at = datetime.now(UTC)
    db.commit()


def invalidate_token(db: Session, token: str) -> bool:
    """Mark a token invalid (logout). Returns True if a valid row was changed."""
    updated = (
        db.query(AuthToken)
        .filter(AuthToken.token == token, AuthToken.is_valid.is_(True))
        .update({AuthToken.is_valid: False}, synchronize_session=False)
    )
    db.commit()
    return updated > 0


def invalidate_all_user_tokens(
    db: Session,
    user_id: int,
    except_token: str | None = None,
) -> int:
    """Invalidate every valid token of a user, optionally keeping one. Returns rows changed."""
    query = db.query(AuthToken).filter(
        AuthToken.user_id == user_id,
        AuthToken.is_valid.is_(True),
    )
    if except_token:
        query = query.filter(AuthToken.token != except_token)
    updated = query.update({AuthToken.is_valid: False}, synchronize_session=False)
    db.commit()
    if updated:
        logger.info(
            "User tokens invalidated",
            extra={"user_id": user_id, "token_count": updated},
        )
    return updated


def get_user_sessions(db: Session, user_id: int) -> list[AuthToken]:
    """Active sign-in sessions of a user, most recently used first."""
    rows = (
        db.query(AuthToken)
        .filter(
            AuthToken.user_id == user_id,
            AuthToken.type == TokenType.AUTH,
            AuthToken.is_valid.is_(True),
        )
        .order_by(AuthToken.last_used_at.desc(), AuthToken.id.desc())
        .all()
    )
    now = datetime.now(UTC)
    return [row for row in rows if as_utc(row.expires_at) > now]


def rotate_refresh_token(
    db: Session,
    refresh_token: str,
    user_agent: str | None = None,
    remember_me: bool = False,
) -> tuple[User, TokenPair]:
    """
    Exchange a valid refresh token for a new access/refresh pair.
    The presented refresh token is invalidated. Raises TokenError on any bad input.
    """
    try:
        payload = decode_access_token(refresh_token)
    except jwt.PyJWTError as e:
        raise TokenError("Invalid refresh token") from e

    row = find_active_token(db, refresh_token, TokenType.REFRESH)
    if row is None:
        raise TokenError("Invalid or expired refresh token")

    if str(row.user_id) != str(payload.get("sub")):
        raise TokenError("Invalid refresh token")

    user = db.get(User, row.user_id)
    if user is None:
        raise TokenError("Invalid refresh token")

    row.is_valid = False
    pair = create_token_pair(db, user, user_agent=user_agent, remember_me=remember_me)
    logger.info("Token pair refreshed", extra={"user_id": user.id})
    return user, pair
