"""Pydantic schemas for family members, relationships and the assembled tree."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

Gender = Literal["male", "female", "other"]

RelationshipType = Literal[
    "parent-child",
    "spouse",
    "sibling",
    "grandparent",
    "cousin",
    "uncle-aunt",
    "nephew-niece",
    "other",
]

def _dedupe_ids(value: list[int] | None) -> list[int] | None:
    """Drop duplicate ids, keeping first-seen order."""
    if value is None:
        return None
    seen: list[int] = []
    for item in value:
        if item not in seen:
            seen.append(item)
    return seen


class MemberCreate(BaseModel):
    """New family member. children_ids is maintained from the children's parent_ids."""

    model_config = {"extra": "ignore"}

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    birth_date: date
    death_date: date | None = None
    gender: Gender
    generation: int = Field(..., ge=0, le=1000)
    parent_ids: list[int] = Field(default_factory=list, max_length=2)
    spouse_id: int | None = None
    photo_url: str | None = Field(default=None, max_length=2048)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must be non-empty")
        return v.strip()

    @field_validator("parent_ids")
    @classmethod
    def unique_parent_ids(cls, v: list[int]) -> list[int]:
        return _dedupe_ids(v) or []

    @model_validator(mode="after")
    def death_after_birth(self) -> "MemberCreate":
        if self.death_date is not None and self.death_date < self.birth_date:
            raise ValueError("death_date must not be before birth_date")
        return self


class MemberUpdate(BaseModel):
    """Partial update; only fields present in the request body are changed."""

    model_config = {"extra": "ignore"}

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    birth_date: date | None = None
    death_date: date | None = None
    gender: Gender | None = None
    generation: int | None = Field(default=None, ge=0, le=1000)
    parent_ids: list[int] | None = Field(default=None, max_length=2)
    spouse_id: int | None = None
    photo_url: str | None = Field(default=None, max_length=2048)

    @field_validator("parent_ids")
    @classmethod
    def unique_parent_ids(cls, v: list[int] | None) -> list[int] | None:
        return _dedupe_ids(v)


class MemberOut(BaseModel):
    """Family member as returned by the API."""

    model_config = {"from_attributes": True}

    id: int
    first_name: str
    last_name: str
    birth_date: date
    death_date: date | None = None
    gender: str
    generation: int
    parent_ids: list[int] = Field(default_factory=list)
    children_ids: list[int] = Field(default_factory=list)
    spouse_id: int | None = None
    photo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MemberResponse(BaseModel):
    message: str | None = None
    data: MemberOut


class MembersListResponse(BaseModel):
    data: list[MemberOut]


class MemberSearchResponse(BaseModel):
    message: str
    count: int
    data: list[MemberOut]


class RelationshipCreate(BaseModel):
    """Typed edge between two existing members."""

    person1_id: int = Field(..., ge=1)
    person2_id: int = Field(..., ge=1)
    relationship_type: RelationshipType

    @model_validator(mode="after")
    def distinct_people(self) -> "RelationshipCreate":
        if self.person1_id == self.person2_id:
            raise ValueError("person1_id and person2_id must differ")
        return self


class RelationshipOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    person1_id: int
    person2_id: int
    relationship_type: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RelationshipResponse(BaseModel):
    message: str
    data: RelationshipOut


class FamilyTreeResponse(BaseModel):
    """All members and relationships."""

    members: list[MemberOut]
    relationships: list[RelationshipOut]


class FamilyTreeExportMetadata(BaseModel):
    model_config = {"populate_by_name": True}

    export_date: datetime = Field(..., alias="exportDate")
    total_members: int = Field(..., alias="totalMembers")
    total_relationships: int = Field(..., alias="totalRelationships")
    generations: int


class FamilyTreeExport(FamilyTreeResponse):
    """Downloadable snapshot of the tree with summary metadata."""

    metadata: FamilyTreeExportMetadata
