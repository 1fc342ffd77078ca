from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from infrastructure.database.ops.readings import ReadingOperations


@dataclass(frozen=True)
class ReadingRepository:
    _backend: ReadingOperations

    def insert(self, device_token: str, reading: dict[str, Any]) -> None:
        self._backend.insert_reading(device_token, reading)

    def latest(self, device_token: str, count: int) -> list[dict[str, Any]]:
        return self._backend.get_latest_readings(device_token, count)

    def between(self, device_token: str, start_ms: int, end_ms: int) -> list[dict[str, Any]]:
        return self._backend.get_readings_between(device_token, start_ms, end_ms)

    def get(self, device_token: str, record_key: str) -> dict[str, Any] | None:
        return self._backend.get_reading(device_token, record_key)

    def update(self, device_token: str, record_key: str, changes: dict[str, float]) -> bool:
        return self._backend.update_reading(device_token, record_key, changes)

    def delete(self, device_token: str, record_key: str) -> bool:
        return self._backend.delete_reading(device_token, record_key)

    def delete_all(self, device_token: str) -> int:
        return self._backend.delete_all_readings(device_token)
