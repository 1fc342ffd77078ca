"""
Device Entity
=============
A registered monitoring device owned by one user.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.utils.time import coerce_datetime, format_display, to_epoch_millis


@dataclass(frozen=True)
class Coordinates:
    lat: float = 0.0
    lng: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Device:
    """
    Device record.

    Attributes:
        id: Device ID (caller supplied or generated)
        name: Display name
        location: Free-text location
        coordinates: Latitude/longitude (defaults to 0, 0)
        user_id: Owning user
        auth_token: External key addressing the reading stream
        registration_date: ISO-8601 UTC registration time
    """

    id: str
    name: str
    location: str
    coordinates: Coordinates
    user_id: str
    auth_token: str
    registration_date: str | None = None

    @property
    def token(self) -> str:
        """Stream address; falls back to the device ID."""
        return self.auth_token or self.id

    @property
    def registration_date_formatted(self) -> str | None:
        registered = coerce_datetime(self.registration_date)
        if registered is None:
            return None
        date, time = format_display(to_epoch_millis(registered))
        return f"{date} {time}"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Device":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            location=row.get("location") or "",
            coordinates=Coordinates(
                lat=float(row.get("lat") or 0.0),
                lng=float(row.get("lng") or 0.0),
            ),
            user_id=str(row["user_id"]),
            auth_token=row.get("auth_token") or str(row["id"]),
            registration_date=row.get("registration_date"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "coordinates": self.coordinates.to_dict(),
            "user_id": self.user_id,
            "auth_token": self.token,
            "registration_date": self.registration_date,
            "registration_date_formatted": self.registration_date_formatted,
        }


@dataclass(frozen=True)
class DeviceToken:
    token: str
    device_id: str

    def to_dict(self) -> dict[str, str]:
        return {"token": self.token, "device_id": self.device_id}
