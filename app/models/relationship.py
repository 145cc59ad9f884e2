"""ORM model for typed edges between two family members."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint, func

from app.models.base import Base


class Relationship(Base):
    """
    Edge between person1_id and person2_id. The (person1_id, person2_id,
    relationship_type) triple is unique. Member ids are not foreign keys.
    """

    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint(
            "person1_id",
            "person2_id",
            "relationship_type",
            name="uq_relationships_person1_person2_type",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    person1_id = Column(Integer, nullable=False, index=True)
    person2_id = Column(Integer, nullable=False, index=True)
    relationship_type = Column(String(32), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
