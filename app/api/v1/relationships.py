"""Relationship endpoints. Writes are admin-only; duplicates are rejected with 409."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.members import RelationshipCreate, RelationshipOut, RelationshipResponse
from app.services.members import MemberReferenceError
from app.services.relationships import (
    DuplicateRelationshipError,
    RelationshipNotFoundError,
    create_relationship,
    delete_relationship,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=RelationshipResponse, status_code=status.HTTP_201_CREATED)
def post_relationship(
    body: RelationshipCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> RelationshipResponse:
    try:
        relationship = create_relationship(db, body)
    except MemberReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except DuplicateRelationshipError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error adding relationship: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add relationship") from e
    return RelationshipResponse(
        message="Relationship added successfully",
        data=RelationshipOut.model_validate(relationship),
    )


@router.delete("/{relationship_id}", response_model=MessageResponse)
def remove_relationship(
    relationship_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    try:
        delete_relationship(db, relationship_id)
    except RelationshipNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting relationship: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete relationship") from e
    return MessageResponse(message="Relationship deleted successfully")
