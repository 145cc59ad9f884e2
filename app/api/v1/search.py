"""Member search by generation, name fragments and gender."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.members import Gender, MemberOut, MemberSearchResponse
from app.services.members import search_members

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=MemberSearchResponse)
def search(
    db: Annotated[Session, Depends(get_db)],
    generation: Annotated[int | None, Query(ge=0)] = None,
    first_name: Annotated[str | None, Query(alias="firstName", max_length=50)] = None,
    last_name: Annotated[str | None, Query(alias="lastName", max_length=50)] = None,
    gender: Annotated[Gender | None, Query()] = None,
) -> MemberSearchResponse:
    """Names match case-insensitively as substrings; all given filters must match."""
    try:
        members = search_members(
            db,
            generation=generation,
            first_name=first_name,
            last_name=last_name,
            gender=gender,
        )
    except SQLAlchemyError as e:
        logger.exception("Error searching family members: %s", e)
        raise HTTPException(status_code=500, detail="Failed to search family members") from e
    return MemberSearchResponse(
        message="Family members found",
        count=len(members),
        data=[MemberOut.model_validate(m) for m in members],
    )
