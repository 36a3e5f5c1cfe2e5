"""Shared test fixtures for PlanIt trip history."""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (local PostgreSQL doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from core.db.memory import InMemoryAuditStore, InMemoryTripStore  # noqa: E402
from core.models.identity import Anonymous, Authenticated, RequestContext  # noqa: E402
from core.services.audit import AuditLog  # noqa: E402
from core.services.trips import TripService  # noqa: E402


class TickingClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def trip_store(clock):
    return InMemoryTripStore(clock=clock)


@pytest.fixture
def audit_store():
    return InMemoryAuditStore()


@pytest.fixture
def trip_service(trip_store, audit_store, clock):
    return TripService(trips=trip_store, audit=AuditLog(audit_store), clock=clock)


@pytest.fixture
def alice():
    return RequestContext(requester=Authenticated(user_id="user_alice"), source_ip="10.0.0.1", source_agent="pytest")


@pytest.fixture
def bob():
    return RequestContext(requester=Authenticated(user_id="user_bob"), source_ip="10.0.0.2")


@pytest.fixture
def anonymous():
    return RequestContext(requester=Anonymous(), source_ip="10.0.0.3")


# PostgreSQL fixtures
@pytest.fixture
def pg_connection():
    """Provide a PostgreSQL connection for integration tests."""
    import psycopg
    from core.config import get_config

    config = get_config()
    conn_str = (
        f"host={config.db_host} port={config.db_port} "
        f"dbname={config.db_name} user={config.db_user} "
        f"password={config.db_password}"
    )

    conn = psycopg.connect(conn_str)
    yield conn

    # Rollback any uncommitted changes
    conn.rollback()
    conn.close()


@pytest.fixture
def db_pool(pg_connection):
    """Open a DatabasePool against the local database and empty both tables afterwards."""
    from core.config import get_config
    from core.db.pool import DatabasePool

    pool = DatabasePool(get_config())
    pool.open()
    yield pool
    pool.close()

    with pg_connection.cursor() as cur:
        cur.execute("DELETE FROM audit_logs")
        cur.execute("DELETE FROM trips")
    pg_connection.commit()
