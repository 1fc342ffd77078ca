"""
Device Schemas
==============

Pydantic models for device registration request validation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.device import Coordinates


class CoordinatesModel(BaseModel):
    lat: float = Field(default=0.0, ge=-90, le=90)
    lng: float = Field(default=0.0, ge=-180, le=180)

    def to_domain(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)


class CreateDeviceRequest(BaseModel):
    """Request model for registering a device"""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=100, description="Device name")
    location: str = Field(default="", max_length=200, description="Free-text location")
    coordinates: Optional[CoordinatesModel] = None
    auth_token: Optional[str] = Field(default=None, max_length=128, description="Stream token (defaults to ID)")
    custom_id: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Caller-chosen device ID",
    )

    @field_validator("name")
    def _strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name cannot be blank")
        return v.strip()


class UpdateDeviceRequest(BaseModel):
    """Only name, location and coordinates may change."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    location: Optional[str] = Field(default=None, max_length=200)
    coordinates: Optional[CoordinatesModel] = None

    def to_changes(self) -> dict:
        changes = self.model_dump(exclude_none=True, exclude={"coordinates"})
        if self.coordinates is not None:
            changes["coordinates"] = self.coordinates.to_domain()
        return changes
