"""SQLAlchemy ORM model for the trips table."""

from sqlalchemy import Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from core.db.schemas.base import Base


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(String(255))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    plan_payload = mapped_column(JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    last_updated = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    deleted_at = mapped_column(TIMESTAMP(timezone=True))
    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    updated_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    __table_args__ = (
        Index("idx_trips_owner_id", "owner_id"),
        Index("idx_trips_last_updated", "last_updated"),
        Index("idx_trips_title", "title"),
        Index("idx_trips_location", "location"),
        Index("idx_trips_deleted_at", "deleted_at"),
    )
