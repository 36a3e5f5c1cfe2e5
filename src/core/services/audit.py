"""Best-effort audit logging for trip mutations.

Callers mutate first, then call :meth:`AuditLog.record`. A failed append is
logged and reported as ``None``; it never raises into the caller, so the
mutation's outcome stands either way.
"""

import logging
from typing import Any

from core.db.audit_store import AuditStore
from core.errors import AuditWriteFailedError
from core.models.audit import AuditAction, AuditEntry, AuditFilter
from core.models.identity import RequestContext

logger = logging.getLogger(__name__)


class AuditLog:
    def __init__(self, store: AuditStore) -> None:
        self._store = store

    def record(
        self,
        action: AuditAction,
        entity_id: str,
        context: RequestContext,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> AuditEntry | None:
        entry = AuditEntry(
            entity_id=entity_id,
            action=action,
            actor_id=context.actor_id,
            before=before,
            after=after,
            source_ip=context.source_ip,
            source_agent=context.source_agent,
        )
        try:
            self._store.append(entry)
        except Exception as e:
            failure = AuditWriteFailedError(f"Failed to append {action.value} audit entry for trip {entity_id}: {e}")
            logger.error("%s [%s]", failure.message, failure.code.value, exc_info=e)
            return None
        logger.info("Audit entry %s recorded: %s %s", entry.id, action.value, entity_id)
        return entry

    def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        return self._store.query(audit_filter)
