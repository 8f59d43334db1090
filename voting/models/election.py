"""Election ORM — persists one election workflow and its state snapshot.

Invariants:
    - id is UUID primary key
    - admin_principal is fixed at creation and never updated
    - state_snapshot is the JSON form of ElectionState (core/election_snapshot.py)
    - status mirrors state_snapshot["status"] for filtering without JSON queries

Design Decisions:
    - JSON snapshot column over normalized voter/proposal tables: the controller
      owns all rules in memory, the database only has to give the state back
    - events removed explicitly by the service before the election row
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from voting.db.base import Base


class Election(Base):
    """Election aggregate root — events reference it by election_id."""
    __tablename__ = "elections"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    admin_principal: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default="registering_voters", index=True,
    )
    state_snapshot: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
