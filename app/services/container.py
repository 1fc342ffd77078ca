from __future__ import annotations

import logging
from dataclasses import dataclass

from app.config import AppConfig
from app.services.application.activity_log_service import ActivityLogService
from app.services.application.dashboard_service import DashboardService
from app.services.application.device_service import DeviceService
from app.services.application.sensor_data_service import SensorDataService
from infrastructure.database.repositories.activity_log import ActivityRepository
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.readings import ReadingRepository
from infrastructure.database.sqlite_handler import SQLiteDatabaseHandler
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Aggregate and manage core backend services."""

    config: AppConfig
    database: SQLiteDatabaseHandler
    device_repo: DeviceRepository
    readings_repo: ReadingRepository
    activity_repo: ActivityRepository
    audit_logger: AuditLogger
    activity_log_service: ActivityLogService
    device_service: DeviceService
    sensor_data_service: SensorDataService
    dashboard_service: DashboardService

    @classmethod
    def build(cls, config: AppConfig) -> "ServiceContainer":
        """Construct the service container with all dependencies."""
        logger.info("Building ServiceContainer...")
        database = SQLiteDatabaseHandler(config.database_path)
        database.create_tables()

        device_repo = DeviceRepository(database)
        readings_repo = ReadingRepository(database)
        activity_repo = ActivityRepository(database)
        audit_logger = AuditLogger(config.audit_log_path, config.log_level)

        activity_log_service = ActivityLogService(
            activity_repo,
            default_limit=config.logs_limit,
            alerts_limit=config.recent_alerts_limit,
        )
        device_service = DeviceService(device_repo, activity_log_service, audit_logger)
        sensor_data_service = SensorDataService(
            readings_repo,
            device_service,
            activity_log_service,
            audit_logger,
            online_window_seconds=config.telemetry_online_seconds,
        )
        dashboard_service = DashboardService(
            device_service,
            sensor_data_service,
            activity_log_service,
            table_page_size=config.table_page_size,
        )

        logger.info("ServiceContainer built successfully.")
        return cls(
            config=config,
            database=database,
            device_repo=device_repo,
            readings_repo=readings_repo,
            activity_repo=activity_repo,
            audit_logger=audit_logger,
            activity_log_service=activity_log_service,
            device_service=device_service,
            sensor_data_service=sensor_data_service,
            dashboard_service=dashboard_service,
        )

    def shutdown(self) -> None:
        """Release external resources before process exit."""
        self.database.close_db()
        logger.info("ServiceContainer shutdown complete.")
