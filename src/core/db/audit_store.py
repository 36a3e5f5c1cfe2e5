"""Append-only persistence for audit entries.

Implementations must never update or delete an appended entry. Appends run
in their own transaction, separate from the mutation they describe.
"""

from abc import ABC, abstractmethod
from typing import Any

from psycopg import sql
from psycopg.types.json import Jsonb

from core.db.pool import DatabasePool
from core.models.audit import AuditAction, AuditEntry, AuditFilter


class AuditStore(ABC):
    @abstractmethod
    def append(self, entry: AuditEntry) -> None: ...

    @abstractmethod
    def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        """Entries matching the filter, newest first, paginated."""
        ...


_COLUMNS = sql.SQL(
    "id, entity_type, entity_id, action, actor_id, before, after, source_ip, source_agent, timestamp"
)


def _row_to_entry(row: tuple[Any, ...]) -> AuditEntry:
    return AuditEntry(
        id=str(row[0]),
        entity_type=row[1],
        entity_id=row[2],
        action=AuditAction(row[3]),
        actor_id=row[4],
        before=row[5],
        after=row[6],
        source_ip=row[7],
        source_agent=row[8],
        timestamp=row[9],
    )


class PostgresAuditStore(AuditStore):
    def __init__(self, pool: DatabasePool) -> None:
        self._pool = pool

    def append(self, entry: AuditEntry) -> None:
        query = sql.SQL(
            "INSERT INTO audit_logs ({columns}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)"
        ).format(columns=_COLUMNS)
        params = (
            entry.id,
            entry.entity_type,
            entry.entity_id,
            entry.action.value,
            entry.actor_id,
            Jsonb(entry.before) if entry.before is not None else None,
            Jsonb(entry.after) if entry.after is not None else None,
            entry.source_ip,
            entry.source_agent,
            entry.timestamp,
        )
        with self._pool.connection() as conn:
            conn.execute(query, params)

    def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        conditions = [sql.SQL("entity_type = %s")]
        params: list[Any] = [audit_filter.entity_type]

        if audit_filter.entity_id is not None:
            conditions.append(sql.SQL("entity_id = %s"))
            params.append(audit_filter.entity_id)
        if audit_filter.actor_id is not None:
            conditions.append(sql.SQL("actor_id = %s"))
            params.append(audit_filter.actor_id)
        if audit_filter.action is not None:
            conditions.append(sql.SQL("action = %s"))
            params.append(audit_filter.action.value)
        if audit_filter.start_date is not None:
            conditions.append(sql.SQL("timestamp >= %s"))
            params.append(audit_filter.start_date)
        if audit_filter.end_date is not None:
            conditions.append(sql.SQL("timestamp <= %s"))
            params.append(audit_filter.end_date)

        query = sql.SQL(
            "SELECT {columns} FROM audit_logs WHERE {where} ORDER BY timestamp DESC, id DESC LIMIT %s OFFSET %s"
        ).format(columns=_COLUMNS, where=sql.SQL(" AND ").join(conditions))
        params.extend([audit_filter.limit, audit_filter.offset])

        with self._pool.connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [_row_to_entry(row) for row in rows]
