"""SQLAlchemy ORM model for the append-only audit_logs table."""

from sqlalchemy import CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from core.db.schemas.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(255))
    before = mapped_column(JSONB)
    after = mapped_column(JSONB)
    source_ip: Mapped[str | None] = mapped_column(String(64))
    source_agent: Mapped[str | None] = mapped_column(Text)
    timestamp = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    __table_args__ = (
        CheckConstraint(
            "action IN ('create', 'update', 'soft_delete', 'hard_delete')",
            name="action",
        ),
        Index("idx_audit_logs_entity", "entity_type", "entity_id"),
        Index("idx_audit_logs_actor_id", "actor_id"),
        Index("idx_audit_logs_timestamp", "timestamp"),
    )
