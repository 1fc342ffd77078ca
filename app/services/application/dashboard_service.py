"""Dashboard composition service.

Assembles the data behind the dashboard views (overview, device detail,
reading table, charts) from the device, sensor data and activity log
services. Rendering is left to clients.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from app.constants import Pagination, Periods
from app.domain.exceptions import NotFoundError, SipekaError, ValidationError
from app.domain.sensor_reading import SensorReading
from app.domain.water_quality import evaluate_reading
from app.enums import StatusLevel, TelemetryStatus
from app.services.application.activity_log_service import ActivityLogService
from app.services.application.device_service import DeviceService
from app.services.application.sensor_data_service import SensorDataService
from app.utils.polling import poll_interval_for
from infrastructure.database.pagination import PaginatedResponse, PaginationParams, paginate

logger = logging.getLogger(__name__)


def y_axis_domain(values: Sequence[float]) -> list[float]:
    """Axis range with 10% padding; a flat series gets +/-1, an empty one [-1, 1]."""
    if not values:
        return [-1.0, 1.0]
    low, high = min(values), max(values)
    if low == high:
        return [low - 1, high + 1]
    padding = (high - low) * 0.1
    return [low - padding, high + padding]


def _average(values: list[float]) -> float | None:
    return round(sum(values) / len(values), 2) if values else None


class DashboardService:
    def __init__(
        self,
        device_service: DeviceService,
        sensor_data: SensorDataService,
        activity_log: ActivityLogService,
        *,
        table_page_size: int = Pagination.TABLE_PAGE_SIZE,
    ):
        self._devices = device_service
        self._sensor_data = sensor_data
        self._activity_log = activity_log
        self.table_page_size = table_page_size

    @staticmethod
    def periods() -> list[dict[str, Any]]:
        """Selectable time windows; a window of N minutes requests N points."""
        return [
            {
                "label": label,
                "minutes": minutes,
                "count": minutes,
                "default": minutes == Periods.DEFAULT_MINUTES,
                "poll_interval_seconds": poll_interval_for(minutes),
            }
            for label, minutes in Periods.OPTIONS
        ]

    def device_detail(self, user_id: str, device_id: str) -> dict[str, Any]:
        device = self._devices.fetch_device(user_id, device_id)
        if device is None:
            raise NotFoundError(f"Device '{device_id}' not found")

        metadata = self._sensor_data.fetch_metadata(user_id, device.token)
        latest = self._sensor_data.fetch_latest(user_id, device.token, 1)
        reading = latest[-1] if latest else None
        return {
            "device": device.to_dict(),
            "telemetry_status": metadata.telemetry_status.value,
            "last_seen": metadata.last_seen_ms,
            "latest_reading": reading.to_dict() if reading else None,
            "evaluation": evaluate_reading(reading).to_dict() if reading else None,
        }

    def overview(self, user_id: str) -> dict[str, Any]:
        """Summary across all of the user's devices.

        A device whose stream cannot be read counts as offline with no reading.
        """
        devices = self._devices.fetch_all_devices(user_id)
        online = 0
        temperatures: list[float] = []
        ph_levels: list[float] = []
        needs_attention: list[dict[str, Any]] = []
        summaries: list[dict[str, Any]] = []

        for device in devices:
            status = TelemetryStatus.OFFLINE
            reading: SensorReading | None = None
            try:
                status = self._sensor_data.fetch_metadata(user_id, device.token).telemetry_status
                latest = self._sensor_data.fetch_latest(user_id, device.token, 1)
                reading = latest[-1] if latest else None
            except SipekaError as exc:
                logger.warning("Overview: could not read device %s: %s", device.id, exc)

            if status == TelemetryStatus.ONLINE:
                online += 1
            overall = None
            if reading is not None:
                temperatures.append(reading.temperature)
                ph_levels.append(reading.ph_level)
                overall = evaluate_reading(reading).overall
                if overall != StatusLevel.AMAN:
                    needs_attention.append({"device_id": device.id, "name": device.name, "status": overall.value})
            summaries.append(
                {
                    "device_id": device.id,
                    "name": device.name,
                    "location": device.location,
                    "telemetry_status": status.value,
                    "overall_status": overall.value if overall else None,
                }
            )

        return {
            "total_devices": len(devices),
            "online_devices": online,
            "devices": summaries,
            "needs_attention": needs_attention,
            "average_temperature": _average(temperatures),
            "average_ph": _average(ph_levels),
            "recent_alerts": [e.to_dict() for e in self._activity_log.fetch_recent_alerts(user_id)],
        }

    def table_page(
        self, readings: Sequence[SensorReading], page: int = 1, page_size: int | None = None
    ) -> PaginatedResponse:
        """Newest-first page of readings."""
        try:
            params = PaginationParams.from_request(page=page, page_size=page_size or self.table_page_size)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        ordered = sorted(readings, key=lambda r: (r.timestamp_ms, r.record_key), reverse=True)
        result = paginate(ordered, params)
        result.items = [r.to_dict() for r in result.items]
        return result

    @staticmethod
    def chart_series(readings: Sequence[SensorReading]) -> dict[str, Any]:
        ordered = sorted(readings, key=lambda r: (r.timestamp_ms, r.record_key))
        temperature = [r.temperature for r in ordered]
        ph_level = [r.ph_level for r in ordered]
        ammonia = [r.ammonia for r in ordered]
        return {
            "timestamps": [r.time_formatted for r in ordered],
            "timestamps_ms": [r.timestamp_ms for r in ordered],
            "temperature": temperature,
            "ph_level": ph_level,
            "ammonia": ammonia,
            "y_domains": {
                "temperature": y_axis_domain(temperature),
                "ph_level": y_axis_domain(ph_level),
                "ammonia": y_axis_domain(ammonia),
            },
        }
