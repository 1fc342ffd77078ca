"""
Activity Log Event
==================
Append-only record of something that happened to a user's device.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.enums import LogSeverity, LogType


@dataclass(frozen=True)
class LogEvent:
    id: int
    type: LogType
    message: str
    severity: LogSeverity
    timestamp: str
    device_id: str
    device: str
    user_id: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "LogEvent":
        return cls(
            id=int(row["id"]),
            type=LogType(row["type"]),
            message=row.get("message") or "",
            severity=LogSeverity(row["severity"]),
            timestamp=row["timestamp"],
            device_id=row.get("device_id") or "",
            device=row.get("device_name") or "",
            user_id=str(row["user_id"]),
        )

    def matches(self, search_term: str) -> bool:
        """Case-insensitive substring match over message and device name."""
        needle = search_term.lower()
        return needle in self.message.lower() or needle in self.device.lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp,
            "device_id": self.device_id,
            "device": self.device,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class LogFilters:
    """Filters for the log listing. Empty values mean "not filtered"."""

    search_term: str | None = None
    type: LogType | None = None
    severity: LogSeverity | None = None
    date_range: str | None = None
