"""Family member CRUD and search, keeping parent/child and spouse links symmetric."""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models import FamilyMember, Relationship
from app.schemas.members import MemberCreate, MemberUpdate

logger = logging.getLogger(__name__)


class MemberNotFoundError(Exception):
    """Raised when the requested member does not exist."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MemberReferenceError(Exception):
    """Raised when parent_ids or spouse_id point at a missing member or at the member itself."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _with_id(ids: list[int] | None, member_id: int) -> list[int]:
    ids = list(ids or [])
    if member_id not in ids:
        ids.append(member_id)
    return ids


def _without_id(ids: list[int] | None, member_id: int) -> list[int]:
    return [i for i in (ids or []) if i != member_id]


def _load_members(db: Session, ids: list[int]) -> dict[int, FamilyMember]:
    if not ids:
        return {}
    rows = db.query(FamilyMember).filter(FamilyMember.id.in_(ids)).all()
    return {row.id: row for row in rows}


def _require_members(db: Session, ids: list[int], label: str) -> dict[int, FamilyMember]:
    found = _load_members(db, ids)
    missing = [i for i in ids if i not in found]
    if missing:
        raise MemberReferenceError(f"{label} not found: {missing}")
    return found


def list_members(db: Session) -> list[FamilyMember]:
    return db.query(FamilyMember).order_by(FamilyMember.generation, FamilyMember.id).all()


def get_member(db: Session, member_id: int) -> FamilyMember:
    member = db.get(FamilyMember, member_id)
    if member is None:
        raise MemberNotFoundError("Member not found")
    return member


def _link_spouse(db: Session, member: FamilyMember, spouse: FamilyMember) -> None:
    """Point spouse at member, detaching whoever spouse was married to before."""
    if spouse.spouse_id and spouse.spouse_id != member.id:
        previous = db.get(FamilyMember, spouse.spouse_id)
        if previous is not None and previous.spouse_id == spouse.id:
            previous.spouse_id = None
    spouse.spouse_id = member.id


def create_member(db: Session, data: MemberCreate) -> FamilyMember:
    """Create a member and add it to its parents' children_ids and its spouse's spouse_id."""
    parents = _require_members(db, data.parent_ids, "Parent member(s)")
    spouse = None
    if data.spouse_id is not None:
        spouse = _require_members(db, [data.spouse_id], "Spouse")[data.spouse_id]

    member = FamilyMember(**data.model_dump(), children_ids=[])
    db.add(member)
    db.flush()

    for parent in parents.values():
        parent.children_ids = _with_id(parent.children_ids, member.id)
    if spouse is not None:
        _link_spouse(db, member, spouse)

    db.commit()
    db.refresh(member)
    logger.info("Family member created", extra={"member_id": member.id})
    return member


def update_member(db: Session, member_id: int, data: MemberUpdate) -> FamilyMember:
    """Apply a partial update, moving parent/child and spouse links to match."""
    member = get_member(db, member_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("first_name", "last_name", "birth_date", "gender", "generation"):
        if field in changes and changes[field] is None:
            raise MemberReferenceError(f"{field} cannot be null")

    if "spouse_id" in changes and changes["spouse_id"] != member.spouse_id:
        new_spouse_id = changes["spouse_id"]
        if new_spouse_id == member_id:
            raise MemberReferenceError("A member cannot be their own spouse")
        new_spouse = None
        if new_spouse_id is not None:
            new_spouse = _require_members(db, [new_spouse_id], "Spouse")[new_spouse_id]
        if member.spouse_id:
            old_spouse = db.get(FamilyMember, member.spouse_id)
            if old_spouse is not None and old_spouse.spouse_id == member_id:
                old_spouse.spouse_id = None
        if new_spouse is not None:
            _link_spouse(db, member, new_spouse)

    if "parent_ids" in changes:
        new_parent_ids = changes["parent_ids"] or []
        if member_id in new_parent_ids:
            raise MemberReferenceError("A member cannot be their own parent")
        old_parent_ids = list(member.parent_ids or [])
        added = [p for p in new_parent_ids if p not in old_parent_ids]
        removed = [p for p in old_parent_ids if p not in new_parent_ids]
        for parent in _require_members(db, added, "Parent member(s)").values():
            parent.children_ids = _with_id(parent.children_ids, member_id)
        for parent in _load_members(db, removed).values():
            parent.children_ids = _without_id(parent.children_ids, member_id)
        changes["parent_ids"] = new_parent_ids

    for field, value in changes.items():
        setattr(member, field, value)

    if member.death_date is not None and member.death_date < member.birth_date:
        raise MemberReferenceError("death_date must not be before birth_date")

    db.commit()
    db.refresh(member)
    logger.info(
        "Family member updated",
        extra={"member_id": member_id, "fields": ",".join(sorted(changes))},
    )
    return member


def delete_member(db: Session, member_id: int) -> None:
    """Delete a member, its links from relatives and every relationship mentioning it."""
    member = get_member(db, member_id)

    for parent in _load_members(db, list(member.parent_ids or [])).values():
        parent.children_ids = _without_id(parent.children_ids, member_id)
    for child in _load_members(db, list(member.children_ids or [])).values():
        child.parent_ids = _without_id(child.parent_ids, member_id)
    if member.spouse_id:
        spouse = db.get(FamilyMember, member.spouse_id)
        if spouse is not None and spouse.spouse_id == member_id:
            spouse.spouse_id = None

    removed_relationships = (
        db.query(Relationship)
        .filter(
            or_(
                Relationship.person1_id == member_id,
                Relationship.person2_id == member_id,
            )
        )
        .delete(synchronize_session=False)
    )
    db.delete(member)
    db.commit()
    logger.info(
        "Family member deleted",
        extra={"member_id": member_id, "relationships_deleted": removed_relationships},
    )


def _contains_pattern(value: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_members(
    db: Session,
    generation: int | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    gender: str | None = None,
) -> list[FamilyMember]:
    """Filter members; every provided criterion must match."""
    query = db.query(FamilyMember)
    if generation is not None:
        query = query.filter(FamilyMember.generation == generation)
    if first_name:
        query = query.filter(FamilyMember.first_name.ilike(_contains_pattern(first_name), escape="\\"))
    if last_name:
        query = query.filter(FamilyMember.last_name.ilike(_contains_pattern(last_name), escape="\\"))
    if gender:
        query = query.filter(FamilyMember.gender == gender)
    return query.order_by(FamilyMember.generation, FamilyMember.id).all()
