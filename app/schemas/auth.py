"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from app.models.enums import Role


def normalize_email(value: str) -> str:
    """Lowercase and trim; require a single '@' with text on both sides."""
    normalized = (value or "").strip().lower()
    local, sep, domain = normalized.partition("@")
    if not sep or not local or not domain or "@" in domain:
        raise ValueError("email must be a valid address")
    return normalized


class SignUpRequest(BaseModel):
    """New account details. Accounts are always created with the 'user' role."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN, description="Email (login)")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must be non-empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    model_config = {"populate_by_name": True}

    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")
    remember_me: bool = Field(
        default=False,
        alias="rememberMe",
        description="Issue longer-lived tokens",
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class CurrentUser(BaseModel):
    """Authenticated user (no password hash) for dependency injection and responses."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    role: Role


class SignUpResponse(BaseModel):
    """Created account and its first access token."""

    message: str
    user: CurrentUser
    token: str


class SignInResponse(BaseModel):
    """JWT access token returned after successful sign-in; also set as a cookie."""

    model_config = {"populate_by_name": True}

    message: str
    user: CurrentUser
    token: str = Field(..., description="JWT access token")
    expires_at: datetime = Field(..., alias="expiresAt")


class RefreshResponse(BaseModel):
    """New access token expiry after a refresh; the tokens themselves travel as cookies."""

    model_config = {"populate_by_name": True}

    message: str
    expires_at: datetime = Field(..., alias="expiresAt")


class MessageResponse(BaseModel):
    message: str


class CheckAdminResponse(BaseModel):
    """Authentication and admin status of the caller."""

    model_config = {"populate_by_name": True}

    is_authenticated: bool = Field(..., alias="isAuthenticated")
    is_admin: bool = Field(..., alias="isAdmin")
    user: CurrentUser | None = None
    error: str | None = None


class SessionItem(BaseModel):
    """One active sign-in session. The token value is never returned."""

    model_config = {"populate_by_name": True}

    id: int
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_used: datetime | None = Field(default=None, alias="lastUsed")
    expires_at: datetime = Field(..., alias="expiresAt")
    user_agent: str | None = Field(default=None, alias="userAgent")
    is_current_session: bool = Field(default=False, alias="isCurrentSession")


class SessionsResponse(BaseModel):
    sessions: list[SessionItem]
