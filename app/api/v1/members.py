"""Family member endpoints: public reads, admin-only writes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.members import (
    MemberCreate,
    MemberOut,
    MemberResponse,
    MembersListResponse,
    MemberUpdate,
)
from app.services.members import (
    MemberNotFoundError,
    MemberReferenceError,
    create_member,
    delete_member,
    get_member,
    list_members,
    update_member,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=MembersListResponse)
def get_members(
    db: Annotated[Session, Depends(get_db)],
) -> MembersListResponse:
    """All family members, ordered by generation."""
    try:
        members = list_members(db)
    except SQLAlchemyError as e:
        logger.exception("Error fetching members: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch members") from e
    return MembersListResponse(data=[MemberOut.model_validate(m) for m in members])


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
def post_member(
    body: MemberCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    """Create a member; listed parents gain it as a child and the spouse is linked back."""
    try:
        member = create_member(db, body)
    except MemberReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error adding member: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add member") from e
    return MemberResponse(message="Member added successfully", data=MemberOut.model_validate(member))


@router.get("/{member_id}", response_model=MemberResponse)
def get_member_by_id(
    member_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    try:
        member = get_member(db, member_id)
    except MemberNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Error fetching member: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch member") from e
    return MemberResponse(data=MemberOut.model_validate(member))


@router.put("/{member_id}", response_model=MemberResponse)
def put_member(
    member_id: int,
    body: MemberUpdate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MemberResponse:
    """Partially update a member; parent and spouse changes are mirrored on the relatives."""
    try:
        member = update_member(db, member_id, body)
    except MemberNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except MemberReferenceError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating member: %s", e)
        raise HTTPException(status_code=500, detail="Failed to update member") from e
    return MemberResponse(message="Member updated successfully", data=MemberOut.model_validate(member))


@router.delete("/{member_id}", response_model=MessageResponse)
def remove_member(
    member_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a member, unlink it from relatives and drop its relationships."""
    try:
        delete_member(db, member_id)
    except MemberNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting member: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete member") from e
    return MessageResponse(message="Member deleted successfully")
