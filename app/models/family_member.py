"""ORM model for a person in the family tree."""

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, func

from app.models.base import Base


class FamilyMember(Base):
    """
    One person. parent_ids, children_ids and spouse_id hold other member ids;
    the API keeps both sides of those links in sync.
    """

    __tablename__ = "family_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False, index=True)
    last_name = Column(String(50), nullable=False, index=True)
    birth_date = Column(Date, nullable=False)
    death_date = Column(Date, nullable=True)
    gender = Column(String(16), nullable=False)
    generation = Column(Integer, nullable=False, index=True)
    parent_ids = Column(JSON, nullable=False, default=list)
    children_ids = Column(JSON, nullable=False, default=list)
    spouse_id = Column(Integer, nullable=True)
    photo_url = Column(String(2048), nullable=True)
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
