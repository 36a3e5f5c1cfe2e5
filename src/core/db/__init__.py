"""
Database ORM models, connection pool and stores for PlanIt trip history.

Importing this package registers all models on Base.metadata,
which Alembic needs for autogenerate.
"""

from core.db.audit_store import AuditStore, PostgresAuditStore
from core.db.memory import InMemoryAuditStore, InMemoryTripStore
from core.db.pool import DatabasePool
from core.db.schemas.audit_log import AuditLog
from core.db.schemas.base import Base
from core.db.schemas.trip import Trip
from core.db.trip_store import PostgresTripStore, TripStore

__all__ = [
    "AuditLog",
    "AuditStore",
    "Base",
    "DatabasePool",
    "InMemoryAuditStore",
    "InMemoryTripStore",
    "PostgresAuditStore",
    "PostgresTripStore",
    "Trip",
    "TripStore",
]
