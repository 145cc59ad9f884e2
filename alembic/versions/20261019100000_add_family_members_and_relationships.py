"""Add family_members and relationships tables.

Revision ID: 20261019100000
Revises: 20261019000000
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261019100000"
down_revision: Union[str, None] = "20261019000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "family_members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=False),
        sa.Column("death_date", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=16), nullable=False),
        sa.Column("generation", sa.Integer(), nullable=False),
        sa.Column("parent_ids", sa.JSON(), nullable=False),
        sa.Column("children_ids", sa.JSON(), nullable=False),
        sa.Column("spouse_id", sa.Integer(), nullable=True),
        sa.Column("photo_url", sa.String(length=2048), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_family_members")),
    )
    op.create_index(op.f("ix_family_members_first_name"), "family_members", ["first_name"], unique=False)
    op.create_index(op.f("ix_family_members_last_name"), "family_members", ["last_name"], unique=False)
    op.create_index(op.f("ix_family_members_generation"), "family_members", ["generation"], unique=False)

    op.create_table(
        "relationships",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("person1_id", sa.Integer(), nullable=False),
        sa.Column("person2_id", sa.Integer(), nullable=False),
        sa.Column("relationship_type", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_relationships")),
        sa.UniqueConstraint(
            "person1_id",
            "person2_id",
            "relationship_type",
            name="uq_relationships_person1_person2_type",
        ),
    )
    op.create_index(op.f("ix_relationships_person1_id"), "relationships", ["person1_id"], unique=False)
    op.create_index(op.f("ix_relationships_person2_id"), "relationships", ["person2_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_relationships_person2_id"), table_name="relationships")
    op.drop_index(op.f("ix_relationships_person1_id"), table_name="relationships")
    op.drop_table("relationships")
    op.drop_index(op.f("ix_family_members_generation"), table_name="family_members")
    op.drop_index(op.f("ix_family_members_last_name"), table_name="family_members")
    op.drop_index(op.f("ix_family_members_first_name"), table_name="family_members")
    op.drop_table("family_members")
