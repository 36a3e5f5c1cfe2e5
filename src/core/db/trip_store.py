"""Typed persistence for trip records.

The store is identity-agnostic: it filters by visibility when listing, but
never decides who may read or delete a record. Soft-deleted rows are retained
and excluded from every read path unless ``include_deleted`` is requested.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from psycopg import errors as pg_errors
from psycopg import sql
from psycopg.types.json import Jsonb

from core.db.pool import DatabasePool
from core.errors import ConflictError
from core.models.identity import Owned, owner_id_of, visibility_from_owner_id
from core.models.trip import (
    NewTrip,
    PlanPayload,
    SortDirection,
    TripChanges,
    TripFilter,
    TripPage,
    TripRecord,
)

logger = logging.getLogger(__name__)


class TripStore(ABC):
    @abstractmethod
    def list(self, trip_filter: TripFilter) -> TripPage:
        """Live records matching the filter, sorted and paginated, plus the unpaginated total."""
        ...

    @abstractmethod
    def get_by_id(self, trip_id: str, include_deleted: bool = False) -> TripRecord | None: ...

    @abstractmethod
    def create(self, new_trip: NewTrip) -> TripRecord:
        """Insert a record with server-assigned timestamps. Raises ConflictError on id collision."""
        ...

    @abstractmethod
    def update(self, trip_id: str, changes: TripChanges) -> TripRecord | None: ...

    @abstractmethod
    def soft_delete(self, trip_id: str) -> TripRecord | None:
        """Transition a live record to soft-deleted. Returns None if absent or already deleted."""
        ...

    @abstractmethod
    def hard_delete(self, trip_id: str) -> bool: ...

    @abstractmethod
    def count_live(self) -> int: ...


_COLUMNS = sql.SQL(
    "id, owner_id, title, location, plan_payload, last_updated, created_at, updated_at, deleted_at"
)

_SEARCH_CLAUSE = sql.SQL(
    "(title ILIKE %s OR location ILIKE %s OR plan_payload->'document'->>'searchQuery' ILIKE %s)"
)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so search text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def payload_from_json(value: Any) -> PlanPayload:
    """Read a stored payload, wrapping pre-versioning documents as version 1."""
    if isinstance(value, dict) and "document" in value:
        return PlanPayload.model_validate(value)
    return PlanPayload(document=value if isinstance(value, dict) else {})


def _row_to_record(row: tuple[Any, ...]) -> TripRecord:
    return TripRecord(
        id=str(row[0]),
        visibility=visibility_from_owner_id(row[1]),
        title=row[2],
        location=row[3],
        plan_payload=payload_from_json(row[4]),
        last_updated=row[5],
        created_at=row[6],
        updated_at=row[7],
        deleted_at=row[8],
    )


class PostgresTripStore(TripStore):
    def __init__(self, pool: DatabasePool) -> None:
        self._pool = pool

    def list(self, trip_filter: TripFilter) -> TripPage:
        conditions = [sql.SQL("deleted_at IS NULL")]
        params: list[Any] = []

        if isinstance(trip_filter.visibility, Owned):
            conditions.append(sql.SQL("owner_id = %s"))
            params.append(trip_filter.visibility.user_id)
        else:
            conditions.append(sql.SQL("owner_id IS NULL"))

        if trip_filter.search_text:
            pattern = f"%{escape_like(trip_filter.search_text)}%"
            conditions.append(_SEARCH_CLAUSE)
            params.extend([pattern, pattern, pattern])

        where = sql.SQL(" AND ").join(conditions)
        direction = sql.SQL("ASC" if trip_filter.sort_direction == SortDirection.ASC else "DESC")
        page_query = sql.SQL(
            "SELECT {columns} FROM trips WHERE {where} "
            "ORDER BY {sort} {direction}, created_at ASC, id ASC LIMIT %s OFFSET %s"
        ).format(
            columns=_COLUMNS,
            where=where,
            sort=sql.Identifier(trip_filter.sort_field.column),
            direction=direction,
        )
        count_query = sql.SQL("SELECT COUNT(*) FROM trips WHERE {where}").format(where=where)

        with self._pool.connection() as conn:
            total = conn.execute(count_query, params).fetchone()[0]
            rows = conn.execute(page_query, [*params, trip_filter.limit, trip_filter.offset]).fetchall()

        return TripPage(records=[_row_to_record(row) for row in rows], total=int(total))

    def get_by_id(self, trip_id: str, include_deleted: bool = False) -> TripRecord | None:
        query = sql.SQL("SELECT {columns} FROM trips WHERE id = %s").format(columns=_COLUMNS)
        if not include_deleted:
            query = query + sql.SQL(" AND deleted_at IS NULL")
        with self._pool.connection() as conn:
            row = conn.execute(query, (trip_id,)).fetchone()
        return _row_to_record(row) if row else None

    def create(self, new_trip: NewTrip) -> TripRecord:
        query = sql.SQL(
            "INSERT INTO trips (id, owner_id, title, location, plan_payload) "
            "VALUES (%s, %s, %s, %s, %s) RETURNING {columns}"
        ).format(columns=_COLUMNS)
        params = (
            new_trip.id,
            owner_id_of(new_trip.visibility),
            new_trip.title,
            new_trip.location,
            Jsonb(new_trip.plan_payload.model_dump(mode="json")),
        )
        with self._pool.connection() as conn:
            try:
                row = conn.execute(query, params).fetchone()
            except pg_errors.UniqueViolation as e:
                raise ConflictError(f"Trip {new_trip.id} already exists") from e
        logger.info("Trip created: %s", new_trip.id)
        return _row_to_record(row)

    def update(self, trip_id: str, changes: TripChanges) -> TripRecord | None:
        query = sql.SQL(
            "UPDATE trips SET title = COALESCE(%s, title), location = COALESCE(%s, location), "
            "plan_payload = COALESCE(%s, plan_payload), updated_at = NOW(), last_updated = NOW() "
            "WHERE id = %s AND deleted_at IS NULL RETURNING {columns}"
        ).format(columns=_COLUMNS)
        payload = Jsonb(changes.plan_payload.model_dump(mode="json")) if changes.plan_payload else None
        with self._pool.connection() as conn:
            row = conn.execute(query, (changes.title, changes.location, payload, trip_id)).fetchone()
        return _row_to_record(row) if row else None

    def soft_delete(self, trip_id: str) -> TripRecord | None:
        # The deleted_at guard makes this a single atomic live -> deleted transition.
        query = sql.SQL(
            "UPDATE trips SET deleted_at = NOW(), updated_at = NOW(), last_updated = NOW() "
            "WHERE id = %s AND deleted_at IS NULL RETURNING {columns}"
        ).format(columns=_COLUMNS)
        with self._pool.connection() as conn:
            row = conn.execute(query, (trip_id,)).fetchone()
        if row is None:
            return None
        logger.info("Trip soft deleted: %s", trip_id)
        return _row_to_record(row)

    def hard_delete(self, trip_id: str) -> bool:
        with self._pool.connection() as conn:
            row = conn.execute("DELETE FROM trips WHERE id = %s RETURNING id", (trip_id,)).fetchone()
        if row is None:
            return False
        logger.warning("Trip hard deleted: %s", trip_id)
        return True

    def count_live(self) -> int:
        with self._pool.connection() as conn:
            row = conn.execute("SELECT COUNT(*) FROM trips WHERE deleted_at IS NULL").fetchone()
        return int(row[0])
