"""Relationship creation and removal; the person/person/type triple is unique."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import FamilyMember, Relationship
from app.schemas.members import RelationshipCreate
from app.services.members import MemberReferenceError

logger = logging.getLogger(__name__)


class DuplicateRelationshipError(Exception):
    """Raised when the same (person1_id, person2_id, relationship_type) already exists."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RelationshipNotFoundError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def list_relationships(db: Session) -> list[Relationship]:
    return db.query(Relationship).order_by(Relationship.id).all()


def create_relationship(db: Session, data: RelationshipCreate) -> Relationship:
    """
    Insert a relationship between two existing members.
    Raises DuplicateRelationshipError when the unique constraint rejects the row.
    """
    people = {data.person1_id, data.person2_id}
    found = {
        row.id
        for row in db.query(FamilyMember.id).filter(FamilyMember.id.in_(people)).all()
    }
    missing = sorted(people - found)
    if missing:
        raise MemberReferenceError(f"Member(s) not found: {missing}")

    relationship = Relationship(
        person1_id=data.person1_id,
        person2_id=data.person2_id,
        relationship_type=data.relationship_type,
    )
    db.add(relationship)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateRelationshipError(
            f"Relationship {data.relationship_type!r} between {data.person1_id} "
            f"and {data.person2_id} already exists"
        ) from e
    db.refresh(relationship)
    logger.info(
        "Relationship created",
        extra={
            "relationship_id": relationship.id,
            "relationship_type": relationship.relationship_type,
        },
    )
    return relationship


def delete_relationship(db: Session, relationship_id: int) -> None:
    relationship = db.get(Relationship, relationship_id)
    if relationship is None:
        raise RelationshipNotFoundError("Relationship not found")
    db.delete(relationship)
    db.commit()
    logger.info("Relationship deleted", extra={"relationship_id": relationship_id})
