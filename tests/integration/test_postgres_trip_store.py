"""Integration tests for the PostgreSQL trip and audit stores.

Requires a local database migrated with scripts/migrate_local.py.
"""

import uuid
from concurrent.futures import ThreadPoolExecutor

import psycopg.errors
import pytest

from core.db import PostgresAuditStore, PostgresTripStore
from core.errors import ConflictError
from core.models.audit import AuditAction, AuditEntry, AuditFilter
from core.models.identity import Owned, Public
from core.models.trip import NewTrip, PlanPayload, SortDirection, SortField, TripChanges, TripFilter

pytestmark = pytest.mark.integration

ALICE = Owned(user_id="user_alice")


def _new_trip(title="Porto", visibility=ALICE, search_query=None):
    document = {"searchQuery": search_query} if search_query else {}
    return NewTrip(title=title, location="Portugal", visibility=visibility, plan_payload=PlanPayload(document=document))


# ── Schema ────────────────────────────────────────────────────────────────────


def test_trips_table_exists(pg_connection):
    with pg_connection.cursor() as cur:
        cur.execute("""
            SELECT column_name FROM information_schema.columns
            WHERE table_name = 'trips' ORDER BY ordinal_position
        """)
        columns = [row[0] for row in cur.fetchall()]
    assert "owner_id" in columns
    assert "plan_payload" in columns
    assert "deleted_at" in columns


def test_audit_action_check_constraint(pg_connection):
    with pg_connection.cursor() as cur:
        with pytest.raises(psycopg.errors.CheckViolation):
            cur.execute(
                "INSERT INTO audit_logs (entity_type, entity_id, action) VALUES ('trip', %s, 'restore')",
                (str(uuid.uuid4()),),
            )
    pg_connection.rollback()


# ── Trip store ────────────────────────────────────────────────────────────────


def test_create_and_get(db_pool):
    store = PostgresTripStore(db_pool)
    record = store.create(_new_trip(search_query="port wine"))

    fetched = store.get_by_id(record.id)
    assert fetched == record
    assert fetched.plan_payload.search_query == "port wine"
    assert fetched.created_at == fetched.last_updated


def test_create_duplicate_conflicts(db_pool):
    store = PostgresTripStore(db_pool)
    record = store.create(_new_trip())
    with pytest.raises(ConflictError):
        store.create(NewTrip(id=record.id, title="Again", location="Portugal"))


def test_list_visibility_search_and_sort(db_pool):
    store = PostgresTripStore(db_pool)
    store.create(_new_trip("Bravo"))
    store.create(_new_trip("Alpha"))
    store.create(_new_trip("Public", visibility=Public()))
    store.create(_new_trip("Other", visibility=Owned(user_id="user_bob")))

    page = store.list(TripFilter(visibility=ALICE, sort_field=SortField.TITLE, sort_direction=SortDirection.ASC))
    assert [r.title for r in page.records] == ["Alpha", "Bravo"]
    assert page.total == 2

    assert [r.title for r in store.list(TripFilter(visibility=Public())).records] == ["Public"]
    assert store.list(TripFilter(visibility=ALICE, search_text="ALP")).total == 1
    assert store.list(TripFilter(visibility=ALICE, search_text="%")).total == 0


def test_soft_delete_only_once(db_pool):
    store = PostgresTripStore(db_pool)
    record = store.create(_new_trip())

    assert store.soft_delete(record.id).deleted_at is not None
    assert store.soft_delete(record.id) is None
    assert store.get_by_id(record.id) is None
    assert store.get_by_id(record.id, include_deleted=True) is not None
    assert store.list(TripFilter(visibility=ALICE)).total == 0


def test_concurrent_soft_delete_single_winner(db_pool):
    store = PostgresTripStore(db_pool)
    record = store.create(_new_trip())

    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda _: store.soft_delete(record.id), range(4)))

    assert sum(r is not None for r in results) == 1


def test_update_and_hard_delete(db_pool):
    store = PostgresTripStore(db_pool)
    record = store.create(_new_trip())

    updated = store.update(record.id, TripChanges(title="Porto & Douro"))
    assert updated.title == "Porto & Douro"
    assert updated.location == "Portugal"

    assert store.hard_delete(record.id) is True
    assert store.get_by_id(record.id, include_deleted=True) is None
    assert store.count_live() == 0


# ── Audit store ───────────────────────────────────────────────────────────────


def test_audit_append_and_query(db_pool):
    audit = PostgresAuditStore(db_pool)
    trip_id = str(uuid.uuid4())
    audit.append(AuditEntry(entity_id=trip_id, action=AuditAction.CREATE, actor_id="user_alice", after={"title": "Porto"}))
    audit.append(AuditEntry(entity_id=trip_id, action=AuditAction.SOFT_DELETE, actor_id="user_alice"))

    entries = audit.query(AuditFilter(entity_id=trip_id))
    assert [e.action for e in entries] == [AuditAction.SOFT_DELETE, AuditAction.CREATE]
    assert entries[1].after == {"title": "Porto"}
