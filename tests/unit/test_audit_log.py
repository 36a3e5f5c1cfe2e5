"""Unit tests for best-effort audit recording."""

import logging
from unittest.mock import MagicMock

from core.models.audit import AuditAction, AuditFilter
from core.models.identity import Anonymous, RequestContext
from core.services.audit import AuditLog


def test_record_appends_entry_with_context(audit_store, alice):
    entry = AuditLog(audit_store).record(
        AuditAction.CREATE, "trip-1", alice, after={"title": "Porto"}
    )

    assert entry is not None
    assert audit_store.all() == [entry]
    assert entry.entity_type == "trip"
    assert entry.actor_id == "user_alice"
    assert entry.source_ip == "10.0.0.1"
    assert entry.source_agent == "pytest"
    assert entry.after == {"title": "Porto"}


def test_record_anonymous_actor(audit_store):
    entry = AuditLog(audit_store).record(AuditAction.SOFT_DELETE, "trip-1", RequestContext(requester=Anonymous()))
    assert entry.actor_id is None


def test_record_swallows_store_failure(alice, caplog):
    store = MagicMock()
    store.append.side_effect = RuntimeError("relation audit_logs does not exist")

    with caplog.at_level(logging.ERROR, logger="core.services.audit"):
        entry = AuditLog(store).record(AuditAction.SOFT_DELETE, "trip-1", alice)

    assert entry is None
    store.append.assert_called_once()
    assert "AUDIT_WRITE_FAILED" in caplog.text
    assert "trip-1" in caplog.text


def test_query_delegates_to_store(audit_store, alice):
    log = AuditLog(audit_store)
    log.record(AuditAction.CREATE, "trip-1", alice)
    log.record(AuditAction.CREATE, "trip-2", alice)

    assert [e.entity_id for e in log.query(AuditFilter(entity_id="trip-2"))] == ["trip-2"]
