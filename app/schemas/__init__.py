"""Pydantic request/response schemas."""

from app.schemas.admin import (
    RoleUpdateRequest,
    RoleUpdateResponse,
    UserListItem,
    UsersListResponse,
)
from app.schemas.auth import (
    CheckAdminResponse,
    CurrentUser,
    MessageResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.members import (
    FamilyTreeExport,
    FamilyTreeResponse,
    Gender,
    MemberCreate,
    MemberOut,
    MemberUpdate,
    RelationshipCreate,
    RelationshipOut,
    RelationshipType,
)

__all__ = [
    "CheckAdminResponse",
    "CurrentUser",
    "FamilyTreeExport",
    "FamilyTreeResponse",
    "Gender",
    "HealthResponse",
    "MemberCreate",
    "MemberOut",
    "MemberUpdate",
    "MessageResponse",
    "RelationshipCreate",
    "RelationshipOut",
    "RelationshipType",
    "RoleUpdateRequest",
    "RoleUpdateResponse",
    "SignInRequest",
    "SignInResponse",
    "SignUpRequest",
    "SignUpResponse",
    "UserListItem",
    "UsersListResponse",
]
