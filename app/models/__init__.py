"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.enums import Role, TokenType
from app.models.family_member import FamilyMember
from app.models.relationship import Relationship
from app.models.token import AuthToken
from app.models.user import User

__all__ = [
    "AuthToken",
    "Base",
    "FamilyMember",
    "Relationship",
    "Role",
    "TokenType",
    "User",
]
