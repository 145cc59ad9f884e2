"""Sign-up/sign-in/session endpoints and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import extract_token, hash_password, verify_password
from app.models import AuthToken, Role, TokenType, User
from app.schemas.auth import (
    CheckAdminResponse,
    CurrentUser,
    MessageResponse,
    RefreshResponse,
    SessionItem,
    SessionsResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from app.services.auth import AuthResult, verify_auth
from app.services.authorization import is_admin
from app.services.tokens import (
    TokenError,
    TokenPair,
    create_token_pair,
    get_user_sessions,
    invalidate_all_user_tokens,
    invalidate_token,
    issue_token,
    rotate_refresh_token,
    token_lifetimes,
)

logger = logging.getLogger(__name__)
router = APIRouter()

PERSISTENT_LOGIN_COOKIE = "persistent_login"
SERVER_ERROR = "Server error, please try again later"


def get_auth_result(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResult:
    """Dependency: authentication outcome for the request (never raises for bad tokens)."""
    return verify_auth(request, db)


def get_current_user(
    auth: Annotated[AuthResult, Depends(get_auth_result)],
) -> CurrentUser:
    """Dependency: require a valid session and return the current user. Raises 401 otherwise."""
    if not auth.authenticated or auth.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with an admin role. Raises 403 for non-admin."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def _set_session_cookies(response: Response, pair: TokenPair, remember_me: bool) -> None:
    secure = settings.APP_ENV == "prod"
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        pair.access_token,
        expires=pair.access_expires,
        path="/",
        secure=secure,
        httponly=True,
        samesite="strict",
    )
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        pair.refresh_token,
        expires=pair.refresh_expires,
        path="/",
        secure=secure,
        httponly=True,
        samesite="strict",
    )
    if remember_me:
        response.set_cookie(
            PERSISTENT_LOGIN_COOKIE,
            "true",
            expires=pair.refresh_expires,
            path="/",
            secure=secure,
            samesite="strict",
        )


def _clear_session_cookies(response: Response) -> None:
    for name in (settings.AUTH_COOKIE_NAME, settings.REFRESH_COOKIE_NAME, PERSISTENT_LOGIN_COOKIE):
        response.delete_cookie(name, path="/")


@router.post("/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignUpRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> SignUpResponse:
    """Create a 'user' account and return its first access token."""
    if db.query(User.id).filter(User.email == body.email).first() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    user = User(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role.USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists") from e
    db.refresh(user)

    access_delta, _ = token_lifetimes(user)
    row = issue_token(db, user, access_delta, TokenType.AUTH, request.headers.get("user-agent"))
    logger.info("User signed up", extra={"user_id": user.id})
    return SignUpResponse(
        message="User created successfully",
        user=CurrentUser.model_validate(user),
        token=row.token,
    )


@router.post("/signin", response_model=SignInResponse)
def signin(
    body: SignInRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> SignInResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    The token is also set as an httpOnly cookie along with a refresh token.
    Include it in the Authorization header as: Bearer <token>
    """
    user = db.query(User).filter(User.email == body.email).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Sign-in rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    pair = create_token_pair(
        db,
        user,
        user_agent=request.headers.get("user-agent"),
        remember_me=body.remember_me,
    )
    _set_session_cookies(response, pair, body.remember_me)
    logger.info("User signed in", extra={"user_id": user.id, "remember_me": body.remember_me})
    return SignInResponse(
        message="Login successful",
        user=CurrentUser.model_validate(user),
        token=pair.access_token,
        expires_at=pair.access_expires,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Invalidate the presented access token and refresh cookie, then clear cookies."""
    token = extract_token(request)
    if token:
        invalidate_token(db, token)
    refresh_token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if refresh_token:
        invalidate_token(db, refresh_token)
    _clear_session_cookies(response)
    return MessageResponse(message="Logged out successfully")


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> RefreshResponse:
    """Exchange the refresh-token cookie for a new access/refresh pair."""
    refresh_token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
    if not refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token not provided",
        )
    remember_me = request.cookies.get(PERSISTENT_LOGIN_COOKIE) == "true"
    try:
        _, pair = rotate_refresh_token(
            db,
            refresh_token,
            user_agent=request.headers.get("user-agent"),
            remember_me=remember_me,
        )
    except TokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e

    _set_session_cookies(response, pair, remember_me)
    return RefreshResponse(message="Token refreshed successfully", expires_at=pair.access_expires)


@router.get("/me", response_model=CurrentUser)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the authenticated user (no password hash)."""
    return current_user


@router.get("/check-admin", response_model=CheckAdminResponse, response_model_exclude_none=True)
def check_admin(
    auth: Annotated[AuthResult, Depends(get_auth_result)],
) -> CheckAdminResponse | JSONResponse:
    """Report whether the caller is authenticated and whether they hold an admin role."""
    if not auth.authenticated or auth.user is None:
        body = CheckAdminResponse(
            is_authenticated=False,
            is_admin=False,
            error="Not authenticated",
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return CheckAdminResponse(
        is_authenticated=True,
        is_admin=is_admin(auth.user),
        user=auth.user,
    )


@router.get("/sessions", response_model=SessionsResponse)
def list_sessions(
    auth: Annotated[AuthResult, Depends(get_auth_result)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionsResponse:
    """Active sign-in sessions of the caller; token values are never returned."""
    try:
        rows = get_user_sessions(db, current_user.id)
    except SQLAlchemyError as e:
        logger.exception("Failed to list sessions: %s", e)
        raise HTTPException(status_code=500, detail=SERVER_ERROR) from e
    return SessionsResponse(
        sessions=[
            SessionItem(
                id=row.id,
                created_at=row.created_at,
                last_used=row.last_used_at,
                expires_at=row.expires_at,
                user_agent=row.user_agent,
                is_current_session=row.token == auth.token,
            )
            for row in rows
        ]
    )


@router.delete("/sessions", response_model=MessageResponse)
def revoke_sessions(
    auth: Annotated[AuthResult, Depends(get_auth_result)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    session_id: Annotated[int | None, Query(alias="id")] = None,
    revoke_all: Annotated[bool, Query(alias="all")] = False,
) -> MessageResponse:
    """
    Revoke one other session (?id=<session id>) or every other session (?all=true).
    The current session is kept; use /logout to end it.
    """
    if revoke_all:
        invalidate_all_user_tokens(db, current_user.id, except_token=auth.token)
        return MessageResponse(message="All other sessions terminated successfully")

    if session_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session ID or 'all' parameter required",
        )

    row = (
        db.query(AuthToken)
        .filter(AuthToken.id == session_id, AuthToken.user_id == current_user.id)
        .first()
    )
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    if row.token == auth.token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete current session, use logout instead",
        )
    row.is_valid = False
    db.commit()
    logger.info("Session revoked", extra={"user_id": current_user.id, "token_id": session_id})
    return MessageResponse(message="Session terminated successfully")
