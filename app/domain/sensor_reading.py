"""
Sensor Reading Value Objects
============================
Immutable value objects for one water-quality reading and for partial edits.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, fields
from typing import Any

from app.utils.time import format_display


def generate_record_key(timestamp_ms: int) -> str:
    """Opaque, time-ordered key: zero-padded epoch millis plus a random suffix."""
    return f"{max(0, int(timestamp_ms)):013d}{secrets.token_hex(4)}"


@dataclass(frozen=True)
class NewReading:
    """Measurements supplied by a caller for manual entry."""

    timestamp_ms: int
    temperature: float
    ph_level: float
    ammonia: float


@dataclass(frozen=True)
class SensorReading:
    """
    Immutable sensor reading value object.
    Represents a single point-in-time measurement in one device's stream.
    """

    record_key: str
    timestamp_ms: int
    temperature: float
    ph_level: float
    ammonia: float

    @property
    def date_formatted(self) -> str:
        date, time = format_display(self.timestamp_ms)
        return f"{date} {time}"

    @property
    def time_formatted(self) -> str:
        return format_display(self.timestamp_ms)[1]

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SensorReading":
        return cls(
            record_key=str(row["record_key"]),
            timestamp_ms=int(row["timestamp_ms"]),
            temperature=float(row["temperature"]),
            ph_level=float(row["ph_level"]),
            ammonia=float(row["ammonia"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary"""
        return {
            "record_key": self.record_key,
            "timestamp": self.timestamp_ms,
            "temperature": self.temperature,
            "ph_level": self.ph_level,
            "ammonia": self.ammonia,
            "date_formatted": self.date_formatted,
            "time_formatted": self.time_formatted,
        }


@dataclass(frozen=True)
class ReadingUpdate:
    """Partial edit of a reading's measured fields.

    A field left as ``None`` is absent and stays untouched; key and timestamp
    are not part of the update at all.
    """

    temperature: float | None = None
    ph_level: float | None = None
    ammonia: float | None = None

    def changes(self) -> dict[str, float]:
        """Only the fields that were supplied, keyed by column name."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @property
    def is_empty(self) -> bool:
        return not self.changes()
