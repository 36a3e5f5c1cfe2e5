"""Trip service. Orchestrates the trip store, access policy and audit log.

Each operation runs the same linear steps: validate, resolve identity (already
done by the caller and passed in as a RequestContext), execute against the
store, authorize, audit on mutation, and shape the result.

Validation and authorization failures are raised before any mutation. Audit
failures are swallowed by AuditLog and never change the response.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any, TypeVar

import pydantic

from core.db.trip_store import TripStore
from core.errors import (
    AuthenticationError,
    ErrorCode,
    ForbiddenError,
    NotFoundError,
    PlanItError,
    ValidationError,
)
from core.models.audit import AuditAction, AuditEntryView, AuditFilter, AuditListResult
from core.models.identity import Anonymous, RequestContext, visibility_for
from core.models.trip import (
    AuditSummary,
    CreateTripRequest,
    DeletedTripSummary,
    DeleteResult,
    ListMetadata,
    Pagination,
    RecoveryNotice,
    ServiceStatus,
    TripChanges,
    TripListQuery,
    TripListResult,
    TripRecord,
    TripView,
    normalize_trip_id,
)
from core.services.access_policy import Decision, decide, denial_reason
from core.services.audit import AuditLog
from core.services.enrichment import ImageEnricher, NoImageEnricher, enrich_safely

logger = logging.getLogger(__name__)

SERVICE_NAME = "Trip API"
CONTACT_SUPPORT = "Contact support if you need to recover this trip"

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def parse_model(model: type[ModelT], data: Mapping[str, Any] | None) -> ModelT:
    """Validate raw request data, turning pydantic errors into a ValidationError."""
    try:
        return model.model_validate(dict(data or {}))
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        detail = f"{location}: {first['msg']}" if location else first["msg"]
        raise ValidationError(detail) from e


def validate_trip_id(trip_id: str | None) -> str:
    if not trip_id:
        raise ValidationError("Trip ID is required", code=ErrorCode.INVALID_TRIP_ID)
    try:
        return normalize_trip_id(trip_id)
    except ValueError as e:
        raise ValidationError(
            f"Invalid trip ID format - must be a valid UUID: {trip_id!r}",
            code=ErrorCode.INVALID_TRIP_ID,
        ) from e


class TripService:
    def __init__(
        self,
        trips: TripStore,
        audit: AuditLog,
        enricher: ImageEnricher | None = None,
        recovery_window_days: int = 30,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._trips = trips
        self._audit = audit
        self._enricher = enricher or NoImageEnricher()
        self._recovery_window_days = recovery_window_days
        self._clock = clock

    # --- reads ---

    def list_trips(self, context: RequestContext, params: Mapping[str, Any] | None = None) -> TripListResult:
        query = parse_model(TripListQuery, params)
        visibility = visibility_for(context.requester)
        logger.info(
            "Listing trips for %s (limit=%d, offset=%d, sort=%s %s, search=%s)",
            context.actor_id or "anonymous",
            query.limit,
            query.offset,
            query.sort_by.value,
            query.sort_order.value,
            "yes" if query.search else "no",
        )

        page = self._trips.list(query.to_filter(visibility))
        views = enrich_safely(self._enricher, [TripView.from_record(r) for r in page.records])

        return TripListResult(
            records=views,
            pagination=Pagination.build(page.total, query.limit, query.offset),
            metadata=ListMetadata(
                sort_by=query.sort_by,
                sort_order=query.sort_order,
                search_query=query.search,
                timestamp=self._clock(),
            ),
        )

    def get_trip(self, context: RequestContext, trip_id: str | None) -> TripView:
        record = self._load_authorized(context, validate_trip_id(trip_id), verb="view")
        return enrich_safely(self._enricher, [TripView.from_record(record)])[0]

    # --- mutations ---

    def create_trip(self, context: RequestContext, body: Mapping[str, Any] | None) -> TripView:
        request = parse_model(CreateTripRequest, body)
        try:
            new_trip = request.to_new_trip(visibility_for(context.requester))
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid trip: {e.errors()[0]['msg']}", code=ErrorCode.INVALID_TRIP_ID) from e

        record = self._trips.create(new_trip)
        self._audit.record(AuditAction.CREATE, record.id, context, after=record.snapshot())

        view = TripView.from_record(record)
        return enrich_safely(self._enricher, [view])[0]

    def update_trip(self, context: RequestContext, trip_id: str | None, body: Mapping[str, Any] | None) -> TripView:
        trip_id = validate_trip_id(trip_id)
        changes = parse_model(TripChanges, body)
        existing = self._load_authorized(context, trip_id, verb="update")

        updated = self._trips.update(trip_id, changes)
        if updated is None:
            raise NotFoundError(f"Trip {trip_id} was deleted before it could be updated")
        self._audit.record(
            AuditAction.UPDATE,
            trip_id,
            context,
            before=existing.snapshot(),
            after=updated.snapshot(),
        )
        return enrich_safely(self._enricher, [TripView.from_record(updated)])[0]

    def delete_trip(self, context: RequestContext, trip_id: str | None) -> DeleteResult:
        trip_id = validate_trip_id(trip_id)
        existing = self._load_authorized(context, trip_id, verb="delete")

        # ownerId never changes after creation, so the check above stays valid;
        # soft_delete itself is the atomic guard against concurrent deletes.
        deleted = self._trips.soft_delete(trip_id)
        if deleted is None:
            raise NotFoundError(f"Trip {trip_id} was already deleted")
        logger.info("Trip %s soft deleted by %s", trip_id, context.actor_id or "anonymous")

        entry = self._audit.record(
            AuditAction.SOFT_DELETE,
            trip_id,
            context,
            before=existing.snapshot(),
            after={"deleted_at": deleted.deleted_at.isoformat()},
        )

        return DeleteResult(
            deleted_trip=DeletedTripSummary(
                id=deleted.id,
                title=deleted.title,
                location=deleted.location,
                deleted_at=deleted.deleted_at,
            ),
            audit=AuditSummary(
                action=AuditAction.SOFT_DELETE.value,
                actor_id=context.actor_id,
                timestamp=entry.timestamp if entry else self._clock(),
                source_ip=context.source_ip,
                recorded=entry is not None,
            ),
            recovery=RecoveryNotice(
                message=(
                    "This trip has been moved to trash and can be recovered within "
                    f"{self._recovery_window_days} days"
                ),
                contact_support=CONTACT_SUPPORT,
            ),
        )

    def purge_trip(self, context: RequestContext, trip_id: str | None) -> bool:
        """Physically remove a trip, live or soft-deleted. Administrative use only."""
        trip_id = validate_trip_id(trip_id)
        existing = self._trips.get_by_id(trip_id, include_deleted=True)
        if existing is None:
            raise NotFoundError(f"Trip {trip_id} does not exist")

        if not self._trips.hard_delete(trip_id):
            raise NotFoundError(f"Trip {trip_id} was removed concurrently")
        logger.warning("Trip %s hard deleted by %s", trip_id, context.actor_id or "anonymous")
        self._audit.record(AuditAction.HARD_DELETE, trip_id, context, before=existing.snapshot())
        return True

    # --- audit & status ---

    def list_audit_entries(self, context: RequestContext, params: Mapping[str, Any] | None = None) -> AuditListResult:
        """Audit entries for trips, restricted to actions the caller performed."""
        if isinstance(context.requester, Anonymous):
            raise AuthenticationError("Audit log requires an authenticated caller", code=ErrorCode.AUTH_REQUIRED)
        audit_filter = parse_model(AuditFilter, params)
        entries = self._audit.query(audit_filter.model_copy(update={"actor_id": context.actor_id}))
        return AuditListResult(
            audit_logs=[AuditEntryView.from_entry(e) for e in entries],
            limit=audit_filter.limit,
            offset=audit_filter.offset,
            count=len(entries),
        )

    def service_status(self) -> ServiceStatus:
        try:
            total: int | None = self._trips.count_live()
            healthy = True
        except PlanItError:
            logger.exception("Unable to count trips for status check")
            total = None
            healthy = False
        return ServiceStatus(
            service=SERVICE_NAME,
            status="operational" if healthy else "degraded",
            total_trips=total,
            store_healthy=healthy,
            timestamp=self._clock(),
        )

    # --- helpers ---

    def _load_authorized(self, context: RequestContext, trip_id: str, verb: str) -> TripRecord:
        record = self._trips.get_by_id(trip_id)
        if record is None:
            logger.warning("Trip not found: %s", trip_id)
            raise NotFoundError(f"Trip with ID {trip_id} does not exist")

        if decide(record, context.requester) is Decision.DENY:
            logger.warning(
                "Access denied to %s trip %s for %s",
                verb,
                trip_id,
                context.actor_id or "anonymous",
            )
            raise ForbiddenError(denial_reason(record, context.requester, verb))
        return record
