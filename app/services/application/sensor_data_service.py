"""
Sensor data service
===================

Ownership-checked access to a device's reading stream.

Every public operation first resolves the caller's device by token via
``verify_ownership``; on denial nothing is read from or written to the
reading store. Read failures propagate as RepositoryError so callers can
tell "no data" apart from "store unavailable".
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Iterable

from app.constants import CsvExport, Pagination, Telemetry
from app.domain.device import Device
from app.domain.exceptions import AccessDeniedError, NotFoundError, SipekaError, ValidationError
from app.domain.sensor_reading import NewReading, ReadingUpdate, SensorReading, generate_record_key
from app.domain.water_quality import evaluate_reading
from app.enums import LogSeverity, LogType, StatusLevel, TelemetryStatus
from app.services.application.activity_log_service import ActivityLogService
from app.services.application.device_service import DeviceService
from app.utils.time import iso_now, now_millis
from infrastructure.database.repositories.readings import ReadingRepository
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryMetadata:
    device_token: str
    telemetry_status: TelemetryStatus
    last_seen_ms: int | None = None

    def to_dict(self) -> dict:
        return {
            "device_token": self.device_token,
            "telemetry_status": self.telemetry_status.value,
            "last_seen": self.last_seen_ms,
        }


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: str


def _fmt2(value: float) -> str:
    return f"{value:.2f}"


class SensorDataService:
    def __init__(
        self,
        readings_repo: ReadingRepository,
        device_service: DeviceService,
        activity_log: ActivityLogService | None = None,
        audit_logger: AuditLogger | None = None,
        *,
        online_window_seconds: int = Telemetry.ONLINE_WINDOW_SECONDS,
    ):
        self._readings = readings_repo
        self._devices = device_service
        self._activity_log = activity_log
        self._audit = audit_logger
        self.online_window_seconds = online_window_seconds

    # ------------------------------------------------------------- ownership
    def verify_ownership(self, user_id: str | None, device_token: str | None) -> Device:
        """Return the caller's device addressed by ``device_token``.

        Raises:
            AccessDeniedError: missing identifiers, or no device with this
                token is owned by ``user_id``
        """
        if not user_id or not device_token:
            raise AccessDeniedError("User ID and device token are required")
        device = self._devices.find_owned_by_token(user_id, device_token)
        if device is None:
            logger.warning("Access denied: user %s does not own device token %s", user_id, device_token)
            raise AccessDeniedError("Access denied: device does not belong to this user")
        return device

    # ----------------------------------------------------------------- reads
    def fetch_latest(self, user_id: str, device_token: str, count: int) -> list[SensorReading]:
        """Up to ``count`` most recent readings in ascending time order."""
        self.verify_ownership(user_id, device_token)
        if count < 1 or count > Pagination.MAX_READINGS_COUNT:
            raise ValidationError(f"count must be between 1 and {Pagination.MAX_READINGS_COUNT}")
        rows = self._readings.latest(device_token, count)
        return [SensorReading.from_row(r) for r in rows]

    def fetch_by_range(self, user_id: str, device_token: str, start_ms: int, end_ms: int) -> list[SensorReading]:
        """Readings with ``start_ms <= timestamp <= end_ms``, ascending."""
        self.verify_ownership(user_id, device_token)
        rows = self._readings.between(device_token, int(start_ms), int(end_ms))
        return [SensorReading.from_row(r) for r in rows]

    def fetch_metadata(self, user_id: str, device_token: str) -> TelemetryMetadata:
        """Online when the newest reading is younger than the online window."""
        self.verify_ownership(user_id, device_token)
        latest = self._readings.latest(device_token, 1)
        if not latest:
            return TelemetryMetadata(device_token, TelemetryStatus.OFFLINE)
        last_seen = int(latest[-1]["timestamp_ms"])
        online = now_millis() - last_seen < self.online_window_seconds * 1000
        status = TelemetryStatus.ONLINE if online else TelemetryStatus.OFFLINE
        return TelemetryMetadata(device_token, status, last_seen)

    # ------------------------------------------------------------- mutations
    def add(self, user_id: str, device_token: str, reading: NewReading) -> SensorReading:
        """Store a reading at the caller-supplied timestamp and return it with its key."""
        device = self.verify_ownership(user_id, device_token)
        stored = SensorReading(
            record_key=generate_record_key(reading.timestamp_ms),
            timestamp_ms=int(reading.timestamp_ms),
            temperature=float(reading.temperature),
            ph_level=float(reading.ph_level),
            ammonia=float(reading.ammonia),
        )
        self._readings.insert(
            device_token,
            {
                "record_key": stored.record_key,
                "timestamp_ms": stored.timestamp_ms,
                "temperature": stored.temperature,
                "ph_level": stored.ph_level,
                "ammonia": stored.ammonia,
            },
        )
        logger.info("Reading %s added to %s", stored.record_key, device_token)
        self._audit_event(user_id, "reading.add", f"{device_token}/{stored.record_key}")
        self._log_status(user_id, device, stored)
        return stored

    def edit_by_key(self, user_id: str, device_token: str, record_key: str, update: ReadingUpdate) -> SensorReading:
        """Overwrite only the supplied measured fields; key and timestamp are kept.

        Raises:
            ValidationError: the update carries no fields
            NotFoundError: no reading with this key
        """
        self.verify_ownership(user_id, device_token)
        if update.is_empty:
            raise ValidationError("No reading fields to update")
        if not self._readings.update(device_token, record_key, update.changes()):
            raise NotFoundError(f"Reading '{record_key}' not found")
        row = self._readings.get(device_token, record_key)
        if row is None:
            raise NotFoundError(f"Reading '{record_key}' not found")
        self._audit_event(user_id, "reading.edit", f"{device_token}/{record_key}", fields=sorted(update.changes()))
        return SensorReading.from_row(row)

    def delete_by_key(self, user_id: str, device_token: str, record_key: str) -> None:
        self.verify_ownership(user_id, device_token)
        if not self._readings.delete(device_token, record_key):
            raise NotFoundError(f"Reading '{record_key}' not found")
        logger.info("Reading %s deleted from %s", record_key, device_token)
        self._audit_event(user_id, "reading.delete", f"{device_token}/{record_key}")

    def delete_all(self, user_id: str, device_token: str) -> int:
        """Remove every reading of the stream. Returns the number removed (0 when empty)."""
        self.verify_ownership(user_id, device_token)
        removed = self._readings.delete_all(device_token)
        logger.info("Deleted %d readings from %s", removed, device_token)
        self._audit_event(user_id, "reading.delete_all", device_token, removed=removed)
        return removed

    # ---------------------------------------------------------------- export
    def export_csv(self, user_id: str, device_token: str, readings: Iterable[SensorReading]) -> ExportFile:
        """Render readings newest first with two-decimal values.

        Raises:
            ValidationError: there is nothing to export
        """
        self.verify_ownership(user_id, device_token)
        rows = sorted(readings, key=lambda r: (r.timestamp_ms, r.record_key), reverse=True)
        if not rows:
            raise ValidationError("No data available to export")

        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CsvExport.HEADERS)
        for r in rows:
            writer.writerow([r.date_formatted, _fmt2(r.temperature), _fmt2(r.ph_level), _fmt2(r.ammonia)])

        stamp = iso_now(timespec="seconds").replace(":", "-")
        filename = CsvExport.FILENAME_TEMPLATE.format(token=device_token, stamp=stamp)
        return ExportFile(filename=filename, content=buf.getvalue())

    # --------------------------------------------------------------- helpers
    def _log_status(self, user_id: str, device: Device, reading: SensorReading) -> None:
        if self._activity_log is None:
            return
        evaluation = evaluate_reading(reading)
        if evaluation.overall == StatusLevel.AMAN:
            return
        if evaluation.overall == StatusLevel.BAHAYA:
            log_type, severity = LogType.ALERT, LogSeverity.HIGH
        else:
            log_type, severity = LogType.THRESHOLD, LogSeverity.MEDIUM
        message = (
            f"Kualitas air {evaluation.overall.value}: pH {_fmt2(reading.ph_level)}, "
            f"Suhu {_fmt2(reading.temperature)}°C, Amonia {_fmt2(reading.ammonia)} ppm"
        )
        try:
            self._activity_log.add_log_event(
                user_id=user_id,
                device_id=device.id,
                type=log_type,
                message=message,
                severity=severity,
                device_name=device.name,
            )
        except SipekaError as exc:
            logger.warning("Failed to log status event for %s: %s", device.id, exc)

    def _audit_event(self, user_id: str, action: str, resource: str, **metadata) -> None:
        if self._audit is not None:
            self._audit.log_event(actor=user_id, action=action, resource=resource, outcome="success", **metadata)
