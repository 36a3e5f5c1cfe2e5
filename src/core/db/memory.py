"""
Volatile in-process store backends.

Same contracts as the PostgreSQL stores, held in plain dicts and lists behind
a lock. Suitable for unit tests and local runs; data is lost when the process
exits.
"""

import threading
from collections.abc import Callable
from datetime import datetime, timezone

from core.db.audit_store import AuditStore
from core.db.trip_store import TripStore
from core.errors import ConflictError
from core.models.audit import AuditEntry, AuditFilter
from core.models.identity import Owned
from core.models.trip import (
    NewTrip,
    SortDirection,
    SortField,
    TripChanges,
    TripFilter,
    TripPage,
    TripRecord,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryTripStore(TripStore):
    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._records: dict[str, TripRecord] = {}
        self._lock = threading.Lock()

    def _matches(self, record: TripRecord, trip_filter: TripFilter) -> bool:
        if not record.is_live:
            return False
        if isinstance(trip_filter.visibility, Owned):
            if record.owner_id != trip_filter.visibility.user_id:
                return False
        elif record.owner_id is not None:
            return False
        if trip_filter.search_text:
            needle = trip_filter.search_text.casefold()
            haystacks = [record.title, record.location, record.plan_payload.search_query or ""]
            return any(needle in h.casefold() for h in haystacks)
        return True

    def list(self, trip_filter: TripFilter) -> TripPage:
        with self._lock:
            matched = [r for r in self._records.values() if self._matches(r, trip_filter)]

        # Dict order is insertion order; sort by creation first so ties stay stable.
        matched.sort(key=lambda r: r.created_at)
        sort_key = {
            SortField.LAST_UPDATED: lambda r: r.last_updated,
            SortField.TITLE: lambda r: r.title.casefold(),
            SortField.CREATED_AT: lambda r: r.created_at,
        }[trip_filter.sort_field]
        if trip_filter.sort_direction == SortDirection.DESC:
            # Reverse by key only, keeping creation order within equal keys.
            matched = sorted(matched, key=sort_key, reverse=True)
        else:
            matched = sorted(matched, key=sort_key)

        start = trip_filter.offset
        return TripPage(records=matched[start : start + trip_filter.limit], total=len(matched))

    def get_by_id(self, trip_id: str, include_deleted: bool = False) -> TripRecord | None:
        with self._lock:
            record = self._records.get(trip_id)
        if record is None or (not include_deleted and not record.is_live):
            return None
        return record

    def create(self, new_trip: NewTrip) -> TripRecord:
        with self._lock:
            if new_trip.id in self._records:
                raise ConflictError(f"Trip {new_trip.id} already exists")
            now = self._clock()
            record = TripRecord(
                id=new_trip.id,
                visibility=new_trip.visibility,
                title=new_trip.title,
                location=new_trip.location,
                plan_payload=new_trip.plan_payload,
                last_updated=now,
                created_at=now,
                updated_at=now,
            )
            self._records[record.id] = record
        return record

    def update(self, trip_id: str, changes: TripChanges) -> TripRecord | None:
        with self._lock:
            record = self._records.get(trip_id)
            if record is None or not record.is_live:
                return None
            now = self._clock()
            updates = changes.model_dump(exclude_none=True)
            if changes.plan_payload is not None:
                updates["plan_payload"] = changes.plan_payload
            updated = record.model_copy(update={**updates, "updated_at": now, "last_updated": now})
            self._records[trip_id] = updated
        return updated

    def soft_delete(self, trip_id: str) -> TripRecord | None:
        with self._lock:
            record = self._records.get(trip_id)
            if record is None or not record.is_live:
                return None
            now = self._clock()
            deleted = record.model_copy(update={"deleted_at": now, "updated_at": now, "last_updated": now})
            self._records[trip_id] = deleted
        return deleted

    def hard_delete(self, trip_id: str) -> bool:
        with self._lock:
            return self._records.pop(trip_id, None) is not None

    def count_live(self) -> int:
        with self._lock:
            return sum(1 for r in self._records.values() if r.is_live)


class InMemoryAuditStore(AuditStore):
    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: AuditEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def query(self, audit_filter: AuditFilter) -> list[AuditEntry]:
        with self._lock:
            results = [e for e in self._entries if e.entity_type == audit_filter.entity_type]

        if audit_filter.entity_id is not None:
            results = [e for e in results if e.entity_id == audit_filter.entity_id]
        if audit_filter.actor_id is not None:
            results = [e for e in results if e.actor_id == audit_filter.actor_id]
        if audit_filter.action is not None:
            results = [e for e in results if e.action == audit_filter.action]
        if audit_filter.start_date is not None:
            results = [e for e in results if e.timestamp >= audit_filter.start_date]
        if audit_filter.end_date is not None:
            results = [e for e in results if e.timestamp <= audit_filter.end_date]

        # Newest first; later appends win ties.
        results = list(reversed(results))
        results.sort(key=lambda e: e.timestamp, reverse=True)
        return results[audit_filter.offset : audit_filter.offset + audit_filter.limit]

    def all(self) -> list[AuditEntry]:
        with self._lock:
            return list(self._entries)
