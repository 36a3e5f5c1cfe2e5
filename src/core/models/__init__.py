"""
Pydantic models for PlanIt trip history.
"""

from core.models.audit import AuditAction, AuditEntry, AuditEntryView, AuditFilter, AuditListResult
from core.models.identity import (
    Anonymous,
    Authenticated,
    Owned,
    Public,
    RequestContext,
    visibility_for,
)
from core.models.trip import (
    CreateTripRequest,
    DeleteResult,
    NewTrip,
    Pagination,
    PlanPayload,
    ServiceStatus,
    SortDirection,
    SortField,
    TripChanges,
    TripFilter,
    TripListQuery,
    TripListResult,
    TripPage,
    TripRecord,
    TripView,
)

__all__ = [
    "Anonymous",
    "AuditAction",
    "AuditEntry",
    "AuditEntryView",
    "AuditFilter",
    "AuditListResult",
    "Authenticated",
    "CreateTripRequest",
    "DeleteResult",
    "NewTrip",
    "Owned",
    "Pagination",
    "PlanPayload",
    "Public",
    "RequestContext",
    "ServiceStatus",
    "SortDirection",
    "SortField",
    "TripChanges",
    "TripFilter",
    "TripListQuery",
    "TripListResult",
    "TripPage",
    "TripRecord",
    "TripView",
    "visibility_for",
]
