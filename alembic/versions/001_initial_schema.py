"""Initial schema — elections and election_events.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "elections",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("admin_principal", sa.String(128), nullable=False),
        sa.Column("status", sa.String(40), nullable=False, server_default="registering_voters"),
        sa.Column("state_snapshot", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_elections"),
    )
    op.create_index("ix_elections_status", "elections", ["status"])

    op.create_table(
        "election_events",
        sa.Column("id", sa.Integer, autoincrement=True, nullable=False),
        sa.Column(
            "election_id", UUID(as_uuid=True),
            sa.ForeignKey(
                "elections.id", ondelete="CASCADE",
                name="fk_election_events_election_id_elections",
            ),
            nullable=False,
        ),
        sa.Column("name", sa.String(40), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_election_events"),
    )
    op.create_index("ix_election_events_election_id", "election_events", ["election_id"])


def downgrade() -> None:
    op.drop_index("ix_election_events_election_id", table_name="election_events")
    op.drop_table("election_events")
    op.drop_index("ix_elections_status", table_name="elections")
    op.drop_table("elections")
