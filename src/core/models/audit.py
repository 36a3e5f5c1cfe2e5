"""Pydantic models for the trip audit trail."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ENTITY_TYPE_TRIP = "trip"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    SOFT_DELETE = "soft_delete"
    HARD_DELETE = "hard_delete"


class AuditEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    entity_type: str = ENTITY_TYPE_TRIP
    entity_id: str
    action: AuditAction
    actor_id: str | None = None
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    source_ip: str | None = None
    source_agent: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AuditFilter(BaseModel):
    """Audit query filter. Also parses the ``GET /trips/audit`` query string."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid", frozen=True)

    entity_type: Literal["trip"] = ENTITY_TYPE_TRIP
    entity_id: str | None = None
    action: AuditAction | None = None
    actor_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def start_before_end(self) -> "AuditFilter":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class AuditEntryView(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    entity_type: str
    entity_id: str
    action: AuditAction
    actor_id: str | None
    before: dict[str, Any] | None
    after: dict[str, Any] | None
    source_ip: str | None
    source_agent: str | None
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: AuditEntry) -> "AuditEntryView":
        return cls(**entry.model_dump())


class AuditListResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    audit_logs: list[AuditEntryView]
    limit: int
    offset: int
    count: int
