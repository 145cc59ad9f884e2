"""ORM model for issued tokens (one row per sign-in session or refresh token)."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.models.enums import TokenType, enum_values


class AuthToken(Base):
    """
    Persisted bearer token. A JWT is only accepted while its row exists,
    is_valid is true and expires_at is in the future.
    """

    __tablename__ = "auth_tokens"
    __table_args__ = (Index("ix_auth_tokens_user_id_type", "user_id", "type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    token = Column(Text, nullable=False, index=True)
    type = Column(
        Enum(
            TokenType,
            name="token_type",
            native_enum=False,
            length=16,
            values_callable=enum_values,
        ),
        nullable=False,
        default=TokenType.AUTH,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    is_valid = Column(Boolean, nullable=False, default=True)
    user_agent = Column(String(512), nullable=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="tokens")
