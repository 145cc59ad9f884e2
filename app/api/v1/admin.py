"""Admin-only user management: list users and change roles."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.models import Role, User
from app.schemas.admin import (
    RoleUpdateRequest,
    RoleUpdateResponse,
    UserListItem,
    UsersListResponse,
)
from app.schemas.auth import CurrentUser
from app.services.authorization import RoleChangeError, check_role_change

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users, newest first (admin only). Password hashes are never included."""
    try:
        users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    except SQLAlchemyError as e:
        logger.exception("Error fetching users: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch users") from e
    return UsersListResponse(users=[UserListItem.model_validate(u) for u in users])


@router.post("/users/role", response_model=RoleUpdateResponse)
def update_user_role(
    body: RoleUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> RoleUpdateResponse:
    """
    Change another user's role. Only the main administrator promotes to admin;
    any admin may demote an admin to user; the main administrator cannot be demoted.
    """
    new_role = Role(body.role)
    try:
        target = db.get(User, body.user_id)
        if target is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        try:
            check_role_change(admin.id, admin, target.id, target, new_role)
        except RoleChangeError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        previous_role = target.role
        target.role = new_role
        db.commit()
        db.refresh(target)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating user role: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update user role") from e

    logger.info(
        "User role changed",
        extra={
            "actor_id": admin.id,
            "target_id": target.id,
            "previous_role": Role(previous_role).value,
            "new_role": new_role.value,
        },
    )
    action = "promoted to admin" if new_role == Role.ADMIN else "demoted to user"
    return RoleUpdateResponse(
        message=f"User {action}",
        user=UserListItem.model_validate(target),
    )
