"""Family tree endpoints: the whole tree, and a downloadable JSON export."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.members import FamilyTreeResponse
from app.services.family_tree import build_family_tree, build_family_tree_export

logger = logging.getLogger(__name__)
router = APIRouter()

EXPORT_FORMATS = frozenset({"json"})


@router.get("", response_model=FamilyTreeResponse)
def get_family_tree(
    db: Annotated[Session, Depends(get_db)],
) -> FamilyTreeResponse:
    """All members and relationships. Public: no session required."""
    try:
        return build_family_tree(db)
    except SQLAlchemyError as e:
        logger.exception("Error fetching family tree: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch family tree data") from e


@router.get("/export")
def export_family_tree(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    export_format: Annotated[str | None, Query(alias="format")] = None,
) -> JSONResponse:
    """Download the tree with export metadata as an attachment."""
    if export_format not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid format specified",
        )
    try:
        export = build_family_tree_export(db)
    except SQLAlchemyError as e:
        logger.exception("Error exporting family tree: %s", e)
        raise HTTPException(status_code=500, detail="Failed to export family tree") from e

    logger.info(
        "Family tree exported",
        extra={
            "export_format": export_format,
            "member_count": export.metadata.total_members,
            "relationship_count": export.metadata.total_relationships,
        },
    )
    return JSONResponse(
        content=export.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": 'attachment; filename="family-tree.json"'},
    )
