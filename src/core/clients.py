"""Process-lifetime wiring: built on cold start, reused across warm Lambda invocations.

The connection pool is opened here once and closed at interpreter exit. Every
collaborator below it receives its handle explicitly.
"""

import atexit
import logging
from functools import lru_cache

from core.config import Config, get_config
from core.db.audit_store import PostgresAuditStore
from core.db.pool import DatabasePool
from core.db.trip_store import PostgresTripStore
from core.services.audit import AuditLog
from core.services.trips import TripService

logger = logging.getLogger(__name__)


def build_trip_service(pool: DatabasePool, config: Config) -> TripService:
    return TripService(
        trips=PostgresTripStore(pool),
        audit=AuditLog(PostgresAuditStore(pool)),
        recovery_window_days=config.recovery_window_days,
    )


@lru_cache(maxsize=1)
def get_db_pool() -> DatabasePool:
    pool = DatabasePool(get_config())
    pool.open()
    atexit.register(pool.close)
    return pool


@lru_cache(maxsize=1)
def get_trip_service() -> TripService:
    logger.info("Initializing trip service")
    return build_trip_service(get_db_pool(), get_config())
