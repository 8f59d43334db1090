"""Migration tests — alembic head matches the ORM metadata's named constraints."""

from pathlib import Path

from alembic import command
from alembic.autogenerate import compare_metadata
from alembic.config import Config
from alembic.migration import MigrationContext
from sqlalchemy import create_engine, inspect

import voting.models  # noqa: F401
from voting.db.base import Base

ROOT = Path(__file__).resolve().parents[2]

_CONSTRAINT_OPS = {
    "add_index", "remove_index", "add_fk", "remove_fk",
    "add_constraint", "remove_constraint",
}


def _upgrade_to_head(db_file: Path, monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    # no ini file: logging configuration of the running test session stays intact
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    command.upgrade(config, "head")


def _op_name(diff) -> str:
    # index/fk diffs are tuples; column-level diffs come wrapped in lists
    return diff[0] if isinstance(diff, tuple) else diff[0][0]


def test_migrated_constraint_names_follow_convention(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    _upgrade_to_head(db_file, monkeypatch)

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        inspector = inspect(engine)
        assert inspector.get_pk_constraint("elections")["name"] == "pk_elections"
        assert inspector.get_pk_constraint("election_events")["name"] == "pk_election_events"
        assert [fk["name"] for fk in inspector.get_foreign_keys("election_events")] == [
            "fk_election_events_election_id_elections",
        ]
        assert {ix["name"] for ix in inspector.get_indexes("elections")} == {
            "ix_elections_status",
        }
    finally:
        engine.dispose()


def test_no_index_or_constraint_drift_against_models(tmp_path, monkeypatch):
    db_file = tmp_path / "migrated.db"
    _upgrade_to_head(db_file, monkeypatch)

    engine = create_engine(f"sqlite:///{db_file}")
    try:
        with engine.connect() as conn:
            diffs = compare_metadata(MigrationContext.configure(conn), Base.metadata)
    finally:
        engine.dispose()
    assert [d for d in diffs if _op_name(d) in _CONSTRAINT_OPS] == []
