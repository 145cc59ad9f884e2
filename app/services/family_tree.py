"""Assemble the whole tree (members + relationships) and its export snapshot."""

from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.schemas.members import (
    FamilyTreeExport,
    FamilyTreeExportMetadata,
    FamilyTreeResponse,
    MemberOut,
    RelationshipOut,
)
from app.services.members import list_members
from app.services.relationships import list_relationships


def build_family_tree(db: Session) -> FamilyTreeResponse:
    members = list_members(db)
    relationships = list_relationships(db)
    return FamilyTreeResponse(
        members=[MemberOut.model_validate(m) for m in members],
        relationships=[RelationshipOut.model_validate(r) for r in relationships],
    )


def build_family_tree_export(db: Session) -> FamilyTreeExport:
    """
    Tree snapshot plus metadata: export time, member and relationship counts, and
    the number of distinct generations present.
    """
    tree = build_family_tree(db)
    metadata = FamilyTreeExportMetadata(
        export_date=datetime.now(UTC),
        total_members=len(tree.members),
        total_relationships=len(tree.relationships),
        generations=len({m.generation for m in tree.members}),
    )
    return FamilyTreeExport(
        members=tree.members,
        relationships=tree.relationships,
        metadata=metadata,
    )
