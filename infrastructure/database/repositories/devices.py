from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from infrastructure.database.ops.devices import DeviceOperations


@dataclass(frozen=True)
class DeviceRepository:
    _backend: DeviceOperations

    def create(self, device: dict[str, Any]) -> None:
        self._backend.insert_device(device)

    def get(self, device_id: str) -> dict[str, Any] | None:
        return self._backend.get_device(device_id)

    def get_by_token(self, auth_token: str, user_id: str | None = None) -> dict[str, Any] | None:
        return self._backend.get_device_by_token(auth_token, user_id)

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        return self._backend.list_devices_for_user(user_id)

    def update(self, device_id: str, fields: dict[str, Any]) -> bool:
        return self._backend.update_device(device_id, fields)

    def delete(self, device_id: str) -> bool:
        return self._backend.delete_device(device_id)
