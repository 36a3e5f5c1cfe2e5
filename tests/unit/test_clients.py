from unittest.mock import patch

import pytest

from core import clients
from core.config import Config
from core.db.audit_store import PostgresAuditStore
from core.db.trip_store import PostgresTripStore
from core.services.trips import TripService


@pytest.fixture(autouse=True)
def _clear_caches():
    clients.get_db_pool.cache_clear()
    clients.get_trip_service.cache_clear()
    yield
    clients.get_db_pool.cache_clear()
    clients.get_trip_service.cache_clear()


def _config() -> Config:
    return Config(
        aws_region="us-east-1",
        db_host="localhost",
        db_port=5432,
        db_name="planit_db",
        db_user="planit",
        db_password="localdev",
        environment="test",
        recovery_window_days=7,
    )


def test_build_trip_service_wires_postgres_stores():
    with patch("core.clients.DatabasePool") as pool_class:
        service = clients.build_trip_service(pool_class.return_value, _config())

    assert isinstance(service, TripService)
    assert isinstance(service._trips, PostgresTripStore)
    assert isinstance(service._audit._store, PostgresAuditStore)
    assert service._recovery_window_days == 7


def test_get_db_pool_opens_once_and_registers_close():
    with patch("core.clients.DatabasePool") as pool_class, patch("core.clients.atexit") as mock_atexit, patch(
        "core.clients.get_config", return_value=_config()
    ):
        first = clients.get_db_pool()
        second = clients.get_db_pool()

    assert first is second
    pool_class.return_value.open.assert_called_once()
    mock_atexit.register.assert_called_once_with(pool_class.return_value.close)
