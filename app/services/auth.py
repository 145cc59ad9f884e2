"""Request authentication: bearer token -> persisted session -> user."""

import logging
from dataclasses import dataclass

import jwt
from fastapi import Request
from sqlalchemy.orm import Session

from app.core.security import decode_access_token, extract_token
from app.models import User
from app.schemas.auth import CurrentUser
from app.services.tokens import find_active_token, touch_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of verify_auth. user is set iff authenticated."""

    authenticated: bool
    user: CurrentUser | None = None
    token: str | None = None


NOT_AUTHENTICATED = AuthResult(authenticated=False)


def authenticate_token(db: Session, token: str | None) -> AuthResult:
    """
    Resolve a raw bearer token to a user.

    Missing, malformed, tampered or expired tokens, revoked sessions and tokens whose
    user no longer exists all yield NOT_AUTHENTICATED. Database errors propagate.
    """
    if not token:
        return NOT_AUTHENTICATED
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info("Rejected bearer token: %s", type(e).__name__)
        return NOT_AUTHENTICATED

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.info("Rejected bearer token: invalid sub claim")
        return NOT_AUTHENTICATED

    row = find_active_token(db, token)
    if row is None or row.user_id != user_id:
        logger.info("Rejected bearer token: no active session", extra={"user_id": user_id})
        return NOT_AUTHENTICATED

    user = db.get(User, user_id)
    if user is None:
        logger.info("Rejected bearer token: user no longer exists", extra={"user_id": user_id})
        return NOT_AUTHENTICATED

    current_user = CurrentUser.model_validate(user)
    touch_token(db, row)
    return AuthResult(authenticated=True, user=current_user, token=token)


def verify_auth(request: Request, db: Session) -> AuthResult:
    """Authenticate the request from its Authorization header or session cookie."""
    return authenticate_token(db, extract_token(request))
