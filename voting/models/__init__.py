"""ORM Models — SQLAlchemy declarative models for persisted elections.

Invariants:
    - All models inherit from Base (db/base.py)
    - Election is the aggregate root; events are scoped by election_id

Design Decisions:
    - One file per entity for locality
    - Both models imported here so Base.metadata is complete for create_all
      and alembic autogenerate
"""

from voting.models.election import Election  # noqa: F401
from voting.models.election_event import ElectionEvent  # noqa: F401
