"""Device registry service.

Every lookup is scoped to the owning user; a device owned by someone else is
reported as absent by the read operations and as AccessDeniedError by the
mutations.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

from app.constants import DeviceDefaults
from app.domain.device import Coordinates, Device, DeviceToken
from app.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    RepositoryError,
    SipekaError,
    ValidationError,
)
from app.enums import LogSeverity, LogType
from app.services.application.activity_log_service import ActivityLogService
from app.utils.time import iso_now
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


def generate_device_id(length: int = DeviceDefaults.GENERATED_ID_LENGTH) -> str:
    """Random lowercase alphanumeric identifier."""
    alphabet = DeviceDefaults.GENERATED_ID_ALPHABET
    return "".join(secrets.choice(alphabet) for _ in range(length))


class DeviceService:
    def __init__(
        self,
        repo: DeviceRepository,
        activity_log: ActivityLogService,
        audit_logger: AuditLogger | None = None,
    ):
        self._repo = repo
        self._activity_log = activity_log
        self._audit = audit_logger

    # ------------------------------------------------------------------ reads
    def fetch_all_devices(self, user_id: str) -> list[Device]:
        try:
            rows = self._repo.list_for_user(user_id)
        except RepositoryError as exc:
            logger.error("Error fetching devices for %s: %s", user_id, exc)
            return []
        return [Device.from_row(r) for r in rows]

    def fetch_device(self, user_id: str, device_id: str) -> Device | None:
        try:
            row = self._repo.get(device_id)
        except RepositoryError as exc:
            logger.error("Error fetching device %s: %s", device_id, exc)
            return None
        if row is None or str(row["user_id"]) != str(user_id):
            return None
        return Device.from_row(row)

    def find_owned_by_token(self, user_id: str, device_token: str) -> Device | None:
        """Device addressed by a stream token, only if owned by ``user_id``.

        Store failures propagate; ownership checks must not silently pass or fail.
        """
        row = self._repo.get_by_token(device_token, user_id=user_id)
        return Device.from_row(row) if row else None

    # -------------------------------------------------------------- mutations
    def add_device(
        self,
        user_id: str,
        name: str,
        location: str = "",
        coordinates: Coordinates | None = None,
        auth_token: str | None = None,
        custom_id: str | None = None,
    ) -> Device:
        """Register a device for ``user_id``.

        Raises:
            ValidationError: missing user or name
            ConflictError: ``custom_id`` or ``auth_token`` already registered
        """
        if not user_id:
            raise ValidationError("user_id is required")
        if not name or not name.strip():
            raise ValidationError("Device name is required")

        device_id = (custom_id or "").strip() or generate_device_id()
        if self._repo.get(device_id) is not None:
            raise ConflictError(f"Device ID '{device_id}' is already registered")
        token = (auth_token or "").strip() or device_id
        if self._repo.get_by_token(token) is not None:
            raise ConflictError("Authentication token is already in use by another device")

        coords = coordinates or Coordinates(*DeviceDefaults.DEFAULT_COORDINATES)
        device = Device(
            id=device_id,
            name=name.strip(),
            location=(location or "").strip(),
            coordinates=coords,
            user_id=user_id,
            auth_token=token,
            registration_date=iso_now(),
        )
        self._repo.create(
            {
                "id": device.id,
                "name": device.name,
                "location": device.location,
                "lat": coords.lat,
                "lng": coords.lng,
                "user_id": user_id,
                "auth_token": device.auth_token,
                "registration_date": device.registration_date,
            }
        )
        logger.info("Device %s registered for user %s", device.id, user_id)
        self._record(user_id, device, "Device created", LogSeverity.LOW, "device.create")
        return device

    def update_device(self, user_id: str, device_id: str, changes: dict[str, Any]) -> Device:
        """Update name, location and/or coordinates.

        Raises:
            NotFoundError: device does not exist
            AccessDeniedError: device owned by someone else
            ValidationError: nothing to update
        """
        self._require_owned(user_id, device_id)

        fields: dict[str, Any] = {}
        if changes.get("name") is not None:
            if not str(changes["name"]).strip():
                raise ValidationError("Device name cannot be empty")
            fields["name"] = str(changes["name"]).strip()
        if changes.get("location") is not None:
            fields["location"] = str(changes["location"]).strip()
        coords = changes.get("coordinates")
        if coords is not None:
            if isinstance(coords, Coordinates):
                coords = coords.to_dict()
            fields["lat"] = float(coords.get("lat", 0.0))
            fields["lng"] = float(coords.get("lng", 0.0))
        if not fields:
            raise ValidationError("No device fields to update")

        self._repo.update(device_id, fields)
        updated = self._require_owned(user_id, device_id)
        self._record(user_id, updated, "Device updated", LogSeverity.LOW, "device.update")
        return updated

    def delete_device(self, user_id: str, device_id: str) -> None:
        """Remove the registration together with the readings stored under its token."""
        device = self._require_owned(user_id, device_id)
        self._repo.delete(device_id)
        logger.info("Device %s deleted by user %s", device_id, user_id)
        self._record(user_id, device, "Device deleted", LogSeverity.MEDIUM, "device.delete")

    def generate_device_token(self, user_id: str, device_id: str) -> DeviceToken:
        device = self._require_owned(user_id, device_id)
        self._record(user_id, device, "Authentication token retrieved", LogSeverity.LOW, "device.token")
        return DeviceToken(token=device.token, device_id=device.id)

    # ---------------------------------------------------------------- helpers
    def _require_owned(self, user_id: str, device_id: str) -> Device:
        row = self._repo.get(device_id)
        if row is None:
            raise NotFoundError(f"Device '{device_id}' not found")
        if str(row["user_id"]) != str(user_id):
            raise AccessDeniedError("Device belongs to another user")
        return Device.from_row(row)

    def _record(self, user_id: str, device: Device, message: str, severity: LogSeverity, action: str) -> None:
        try:
            self._activity_log.add_log_event(
                user_id=user_id,
                device_id=device.id,
                type=LogType.CONFIGURATION,
                message=message,
                severity=severity,
                device_name=device.name,
            )
        except SipekaError as exc:
            logger.warning("Failed to log '%s' for device %s: %s", message, device.id, exc)
        if self._audit is not None:
            self._audit.log_event(actor=user_id, action=action, resource=f"device:{device.id}", outcome="success")
