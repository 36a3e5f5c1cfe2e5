"""Pydantic models for trip records, list queries and API views."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.models.identity import Owned, Public, Visibility, owner_id_of

PLAN_PAYLOAD_VERSION = 1
SEARCH_QUERY_KEY = "searchQuery"


class PlanPayload(BaseModel):
    """Versioned, opaque plan document. The store persists it verbatim.

    A bare plan object (no ``document`` key, anything besides ``version``) is
    taken as the document of a version 1 payload. A wrapped payload may not
    carry keys besides ``version`` and ``document``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = Field(default=PLAN_PAYLOAD_VERSION, ge=1)
    document: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_document(cls, value: Any) -> Any:
        if isinstance(value, dict) and "document" not in value and not set(value) <= {"version"}:
            return {"document": value}
        return value

    @property
    def search_query(self) -> str | None:
        value = self.document.get(SEARCH_QUERY_KEY)
        return value if isinstance(value, str) else None


class TripRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    visibility: Visibility
    title: str
    location: str
    plan_payload: PlanPayload
    last_updated: datetime
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def owner_id(self) -> str | None:
        return owner_id_of(self.visibility)

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe copy used as an audit before/after document."""
        data = self.model_dump(mode="json", exclude={"visibility"})
        data["owner_id"] = self.owner_id
        return data


def normalize_trip_id(value: str) -> str:
    """Canonical lowercase UUID text. Raises ValueError for anything else."""
    return str(UUID(value))


class NewTrip(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    visibility: Visibility = Field(default_factory=Public)
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    plan_payload: PlanPayload = Field(default_factory=PlanPayload)

    @field_validator("id")
    @classmethod
    def id_is_uuid(cls, value: str) -> str:
        return normalize_trip_id(value)


class CreateTripRequest(BaseModel):
    """Body of ``POST /trips``, as produced by the planning workflow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    id: str | None = None
    title: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    plan_payload: PlanPayload

    def to_new_trip(self, visibility: Owned | Public) -> NewTrip:
        fields: dict[str, Any] = {
            "visibility": visibility,
            "title": self.title,
            "location": self.location,
            "plan_payload": self.plan_payload,
        }
        if self.id is not None:
            fields["id"] = self.id
        return NewTrip(**fields)


class TripChanges(BaseModel):
    """Body of ``PATCH /trips/{id}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    plan_payload: PlanPayload | None = None

    @model_validator(mode="after")
    def at_least_one_change(self) -> "TripChanges":
        if self.title is None and self.location is None and self.plan_payload is None:
            raise ValueError("at least one of title, location or planPayload must be provided")
        return self


class SortField(str, Enum):
    LAST_UPDATED = "lastUpdated"
    TITLE = "title"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        return _SORT_COLUMNS[self]


_SORT_COLUMNS = {
    SortField.LAST_UPDATED: "last_updated",
    SortField.TITLE: "title",
    SortField.CREATED_AT: "created_at",
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TripFilter(BaseModel):
    """Store-level list filter. Identity-agnostic: scoped by visibility only."""

    model_config = ConfigDict(frozen=True)

    visibility: Visibility
    search_text: str | None = None
    sort_field: SortField = SortField.LAST_UPDATED
    sort_direction: SortDirection = SortDirection.DESC
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class TripListQuery(BaseModel):
    """Query string of ``GET /trips``."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    sort_by: SortField = Field(default=SortField.LAST_UPDATED, alias="sortBy")
    sort_order: SortDirection = Field(default=SortDirection.DESC, alias="sortOrder")
    search: str | None = Field(default=None, min_length=1, max_length=100)

    def to_filter(self, visibility: Owned | Public) -> TripFilter:
        return TripFilter(
            visibility=visibility,
            search_text=self.search,
            sort_field=self.sort_by,
            sort_direction=self.sort_order,
            limit=self.limit,
            offset=self.offset,
        )


class TripPage(BaseModel):
    records: list[TripRecord]
    total: int


# --- API views ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(_CamelModel):
    total: int
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None

    @classmethod
    def build(cls, total: int, limit: int, offset: int) -> "Pagination":
        has_more = offset + limit < total
        return cls(
            total=total,
            limit=limit,
            offset=offset,
            has_more=has_more,
            next_offset=offset + limit if has_more else None,
        )


class TripView(_CamelModel):
    id: str
    owner_id: str | None
    title: str
    location: str
    plan_payload: PlanPayload
    last_updated: datetime
    created_at: datetime
    updated_at: datetime
    image_url: str | None = None

    @classmethod
    def from_record(cls, record: TripRecord) -> "TripView":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            title=record.title,
            location=record.location,
            plan_payload=record.plan_payload,
            last_updated=record.last_updated,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ListMetadata(_CamelModel):
    sort_by: SortField
    sort_order: SortDirection
    search_query: str | None
    timestamp: datetime


class TripListResult(_CamelModel):
    records: list[TripView]
    pagination: Pagination
    metadata: ListMetadata


class DeletedTripSummary(_CamelModel):
    id: str
    title: str
    location: str
    deleted_at: datetime


class AuditSummary(_CamelModel):
    action: str
    actor_id: str | None
    timestamp: datetime
    source_ip: str | None
    recorded: bool


class RecoveryNotice(_CamelModel):
    message: str
    contact_support: str


class DeleteResult(_CamelModel):
    deleted_trip: DeletedTripSummary
    audit: AuditSummary
    recovery: RecoveryNotice


class ServiceStatus(_CamelModel):
    service: str
    status: str
    total_trips: int | None
    store_healthy: bool
    timestamp: datetime
