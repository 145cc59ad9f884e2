"""Request/response schemas for admin user management."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.models.enums import Role

# Roles an admin may assign; main_admin is only set from the CLI.
AssignableRole = Literal["user", "admin"]


class UserListItem(BaseModel):
    """User entry for admin list (no password)."""

    model_config = {"from_attributes": True, "populate_by_name": True}

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime | None = Field(default=None, alias="createdAt")


class UsersListResponse(BaseModel):
    """Response for GET /admin/users (admin only), newest account first."""

    users: list[UserListItem]


class RoleUpdateRequest(BaseModel):
    """Target user and the role to give them."""

    model_config = {"populate_by_name": True}

    user_id: int = Field(..., alias="userId", ge=1)
    role: AssignableRole


class RoleUpdateResponse(BaseModel):
    message: str
    user: UserListItem
