"""
Shared test fixtures for the SIPEKA backend test suite.

Provides:
- In-memory SQLite database with all tables created
- Repository instances wired to the test database
- Service factories wired to real repositories
- Helper utilities for seeding devices and readings

Usage:
    def test_example(seed, sensor_data_service):
        device = seed.create_device(user_id="user-1")
        seed.insert_reading(device.token, temperature=27.0)
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from app.domain.device import Coordinates, Device
from app.domain.sensor_reading import generate_record_key
from app.utils.time import now_millis
from infrastructure.database.repositories.activity_log import ActivityRepository
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.readings import ReadingRepository

# ---------------------------------------------------------------------------
# Database & Repositories
# ---------------------------------------------------------------------------
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler

# ---------------------------------------------------------------------------
# Logging: keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("infrastructure").setLevel(logging.WARNING)
logging.getLogger("app").setLevel(logging.WARNING)


# ========================== Database Fixtures ==============================


@pytest.fixture()
def db_handler():
    """In-memory SQLite database with all tables created.

    Each test gets a fresh database, no cross-test contamination.
    """
    handler = SQLiteDatabaseHandler(":memory:")
    handler.create_tables()
    yield handler
    handler.close_db()


# ========================== Repository Fixtures ============================


@pytest.fixture()
def device_repo(db_handler):
    return DeviceRepository(db_handler)


@pytest.fixture()
def readings_repo(db_handler):
    return ReadingRepository(db_handler)


@pytest.fixture()
def activity_repo(db_handler):
    return ActivityRepository(db_handler)


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def mock_audit_logger():
    """Mock AuditLogger."""
    logger = MagicMock()
    logger.log_event = MagicMock()
    return logger


# ========================== Service Factory Fixtures =======================


@pytest.fixture()
def activity_log_service(activity_repo):
    from app.services.application.activity_log_service import ActivityLogService

    return ActivityLogService(activity_repo, default_limit=100, alerts_limit=5)


@pytest.fixture()
def device_service(device_repo, activity_log_service, mock_audit_logger):
    from app.services.application.device_service import DeviceService

    return DeviceService(device_repo, activity_log_service, mock_audit_logger)


@pytest.fixture()
def sensor_data_service(readings_repo, device_service, activity_log_service, mock_audit_logger):
    from app.services.application.sensor_data_service import SensorDataService

    return SensorDataService(
        readings_repo,
        device_service,
        activity_log_service,
        mock_audit_logger,
        online_window_seconds=180,
    )


@pytest.fixture()
def dashboard_service(device_service, sensor_data_service, activity_log_service):
    from app.services.application.dashboard_service import DashboardService

    return DashboardService(device_service, sensor_data_service, activity_log_service, table_page_size=15)


# ========================== Seed Data Helpers ==============================


class SeedData:
    """Helper to create commonly needed test data.

    Usage in tests::

        def test_something(seed):
            device = seed.create_device(user_id="user-1", device_id="kolam01")
            key = seed.insert_reading(device.token, ph_level=7.2)
    """

    def __init__(self, db_handler: SQLiteDatabaseHandler):
        self._db = db_handler

    def create_device(
        self,
        user_id: str = "user-1",
        device_id: str = "kolam01",
        name: str = "Kolam Lele",
        location: str = "Bogor",
        auth_token: str | None = None,
        registration_date: str = "2026-10-01T00:00:00+00:00",
    ) -> Device:
        """Insert a device row directly and return it."""
        device = Device(
            id=device_id,
            name=name,
            location=location,
            coordinates=Coordinates(-6.59, 106.8),
            user_id=user_id,
            auth_token=auth_token or device_id,
            registration_date=registration_date,
        )
        self._db.insert_device(
            {
                "id": device.id,
                "name": device.name,
                "location": device.location,
                "lat": device.coordinates.lat,
                "lng": device.coordinates.lng,
                "user_id": device.user_id,
                "auth_token": device.auth_token,
                "registration_date": device.registration_date,
            }
        )
        return device

    def insert_reading(
        self,
        device_token: str,
        *,
        timestamp_ms: int | None = None,
        temperature: float = 27.0,
        ph_level: float = 7.2,
        ammonia: float = 0.1,
        record_key: str | None = None,
    ) -> str:
        """Insert a reading and return its record key."""
        ts = now_millis() if timestamp_ms is None else timestamp_ms
        key = record_key or generate_record_key(ts)
        self._db.insert_reading(
            device_token,
            {
                "record_key": key,
                "timestamp_ms": ts,
                "temperature": temperature,
                "ph_level": ph_level,
                "ammonia": ammonia,
            },
        )
        return key

    def insert_log(
        self,
        user_id: str = "user-1",
        *,
        device_id: str = "kolam01",
        device_name: str = "Kolam Lele",
        type: str = "connection",
        message: str = "Test event",
        severity: str = "low",
        timestamp: str = "2026-10-19T00:00:00.000000+00:00",
    ) -> int:
        return self._db.insert_activity(
            {
                "user_id": user_id,
                "device_id": device_id,
                "device_name": device_name,
                "type": type,
                "message": message,
                "severity": severity,
                "timestamp": timestamp,
            }
        )


@pytest.fixture()
def seed(db_handler):
    """SeedData helper for quickly populating the test database."""
    return SeedData(db_handler)
