"""The ORM metadata must match the Alembic revision that creates the tables."""

from core.db import AuditLog, Base, Trip


def test_metadata_registers_both_tables():
    assert set(Base.metadata.tables) == {"trips", "audit_logs"}


def test_trip_indexes():
    assert {index.name for index in Trip.__table__.indexes} == {
        "idx_trips_owner_id",
        "idx_trips_last_updated",
        "idx_trips_title",
        "idx_trips_location",
        "idx_trips_deleted_at",
    }


def test_trip_owner_and_deleted_at_nullable():
    columns = Trip.__table__.columns
    assert columns["owner_id"].nullable
    assert columns["deleted_at"].nullable
    assert not columns["title"].nullable


def test_audit_log_action_constraint_name():
    constraints = {c.name for c in AuditLog.__table__.constraints if c.name and c.name.startswith("chk_")}
    assert constraints == {"chk_audit_logs_action"}
