"""Unit tests for PostgresTripStore with a mocked connection pool."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from psycopg import errors as pg_errors

from core.db.trip_store import PostgresTripStore, escape_like, payload_from_json
from core.errors import ConflictError
from core.models.identity import Owned, Public
from core.models.trip import NewTrip, PlanPayload, TripChanges, TripFilter

TRIP_ID = "0b5e6b9e-3f7a-4c1d-9d8e-2a6f1c3b4d5e"
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _row(owner_id="user_alice", deleted_at=None, payload=None):
    return (
        TRIP_ID,
        owner_id,
        "Porto",
        "Portugal",
        payload if payload is not None else {"version": 1, "document": {"searchQuery": "porto"}},
        NOW,
        NOW,
        NOW,
        deleted_at,
    )


@pytest.fixture
def conn():
    return MagicMock()


@pytest.fixture
def store(conn):
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    return PostgresTripStore(pool)


def _cursor(fetchone=None, fetchall=None):
    cursor = MagicMock()
    cursor.fetchone.return_value = fetchone
    cursor.fetchall.return_value = fetchall or []
    return cursor


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_payload_from_json_versioned():
    assert payload_from_json({"version": 2, "document": {"a": 1}}) == PlanPayload(version=2, document={"a": 1})


def test_payload_from_json_wraps_legacy_document():
    assert payload_from_json({"itinerary": []}) == PlanPayload(version=1, document={"itinerary": []})
    assert payload_from_json(None) == PlanPayload()


def test_list_owned_params(store, conn):
    conn.execute.side_effect = [_cursor(fetchone=(1,)), _cursor(fetchall=[_row()])]

    page = store.list(TripFilter(visibility=Owned(user_id="user_alice"), limit=10, offset=20))

    assert page.total == 1
    assert page.records[0].owner_id == "user_alice"
    count_call, page_call = conn.execute.call_args_list
    assert count_call.args[1] == ["user_alice"]
    assert page_call.args[1] == ["user_alice", 10, 20]


def test_list_public_with_search(store, conn):
    conn.execute.side_effect = [_cursor(fetchone=(0,)), _cursor(fetchall=[])]

    page = store.list(TripFilter(visibility=Public(), search_text="100%"))

    assert page.total == 0
    assert page.records == []
    count_call, page_call = conn.execute.call_args_list
    assert count_call.args[1] == ["%100\\%%"] * 3
    assert page_call.args[1] == ["%100\\%%"] * 3 + [50, 0]


def test_get_by_id_maps_row(store, conn):
    conn.execute.return_value = _cursor(fetchone=_row(owner_id=None))
    record = store.get_by_id(TRIP_ID)
    assert record.visibility == Public()
    assert record.plan_payload.search_query == "porto"
    assert conn.execute.call_args.args[1] == (TRIP_ID,)


def test_get_by_id_missing(store, conn):
    conn.execute.return_value = _cursor(fetchone=None)
    assert store.get_by_id(TRIP_ID) is None


def test_create_passes_owner_and_payload(store, conn):
    conn.execute.return_value = _cursor(fetchone=_row())
    new_trip = NewTrip(
        id=TRIP_ID,
        visibility=Owned(user_id="user_alice"),
        title="Porto",
        location="Portugal",
        plan_payload=PlanPayload(document={"searchQuery": "porto"}),
    )

    record = store.create(new_trip)

    params = conn.execute.call_args.args[1]
    assert params[:4] == (TRIP_ID, "user_alice", "Porto", "Portugal")
    assert params[4].obj == {"version": 1, "document": {"searchQuery": "porto"}}
    assert record.id == TRIP_ID


def test_create_public_stores_null_owner(store, conn):
    conn.execute.return_value = _cursor(fetchone=_row(owner_id=None))
    store.create(NewTrip(id=TRIP_ID, title="Porto", location="Portugal"))
    assert conn.execute.call_args.args[1][1] is None


def test_create_unique_violation_is_conflict(store, conn):
    conn.execute.side_effect = pg_errors.UniqueViolation("duplicate key value violates unique constraint")
    with pytest.raises(ConflictError):
        store.create(NewTrip(id=TRIP_ID, title="Porto", location="Portugal"))


def test_update_passes_only_changed_fields(store, conn):
    conn.execute.return_value = _cursor(fetchone=_row())
    store.update(TRIP_ID, TripChanges(location="Douro Valley"))
    assert conn.execute.call_args.args[1] == (None, "Douro Valley", None, TRIP_ID)


def test_soft_delete_returns_deleted_record(store, conn):
    conn.execute.return_value = _cursor(fetchone=_row(deleted_at=NOW))
    record = store.soft_delete(TRIP_ID)
    assert record.deleted_at == NOW
    assert not record.is_live


def test_soft_delete_already_deleted(store, conn):
    conn.execute.return_value = _cursor(fetchone=None)
    assert store.soft_delete(TRIP_ID) is None


def test_hard_delete(store, conn):
    conn.execute.return_value = _cursor(fetchone=(TRIP_ID,))
    assert store.hard_delete(TRIP_ID) is True
    conn.execute.return_value = _cursor(fetchone=None)
    assert store.hard_delete(TRIP_ID) is False


def test_count_live(store, conn):
    conn.execute.return_value = _cursor(fetchone=(7,))
    assert store.count_live() == 7
