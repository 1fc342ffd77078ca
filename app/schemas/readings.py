"""
Reading Schemas
===============

Pydantic models for sensor reading request validation.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from app.constants import Pagination, Periods
from app.domain.sensor_reading import NewReading, ReadingUpdate
from app.utils.time import parse_reading_timestamp

_TEMPERATURE = AliasChoices("temperature", "suhu")
_PH = AliasChoices("ph_level", "ph", "pH")
_AMMONIA = AliasChoices("ammonia", "amonia")


def _parse_timestamp(value: Any) -> int:
    parsed = parse_reading_timestamp(value)
    if parsed is None:
        raise ValueError("timestamp must be epoch milliseconds or an ISO-8601 date-time")
    return parsed


class CreateReadingRequest(BaseModel):
    """Manual entry of one reading."""

    model_config = ConfigDict(extra="ignore")

    timestamp: int = Field(..., description="Epoch ms or ISO-8601; naive times are Asia/Jakarta")
    temperature: float = Field(..., validation_alias=_TEMPERATURE, allow_inf_nan=False)
    ph_level: float = Field(..., validation_alias=_PH, allow_inf_nan=False)
    ammonia: float = Field(..., validation_alias=_AMMONIA, allow_inf_nan=False)

    @field_validator("timestamp", mode="before")
    def _coerce_timestamp(cls, v):
        return _parse_timestamp(v)

    def to_domain(self) -> NewReading:
        return NewReading(
            timestamp_ms=self.timestamp,
            temperature=self.temperature,
            ph_level=self.ph_level,
            ammonia=self.ammonia,
        )


class UpdateReadingRequest(BaseModel):
    """Partial edit; only keys present in the payload are written."""

    model_config = ConfigDict(extra="ignore")

    temperature: Optional[float] = Field(default=None, validation_alias=_TEMPERATURE, allow_inf_nan=False)
    ph_level: Optional[float] = Field(default=None, validation_alias=_PH, allow_inf_nan=False)
    ammonia: Optional[float] = Field(default=None, validation_alias=_AMMONIA, allow_inf_nan=False)

    @field_validator("temperature", "ph_level", "ammonia", mode="before")
    def _reject_null(cls, v):
        if v is None:
            raise ValueError("value cannot be null")
        return v

    def to_update(self) -> ReadingUpdate:
        supplied = {name: getattr(self, name) for name in self.model_fields_set}
        return ReadingUpdate(**supplied)


class ReadingsQuery(BaseModel):
    """Query string for reading lists: either ``count`` or a ``start``/``end`` range."""

    count: Optional[int] = Field(default=None, ge=1, le=Pagination.MAX_READINGS_COUNT)
    start: Optional[int] = None
    end: Optional[int] = None

    @field_validator("start", "end", mode="before")
    def _coerce_bounds(cls, v):
        if v is None or v == "":
            return None
        if isinstance(v, str) and v.lstrip("-").isdigit():
            v = int(v)
        return _parse_timestamp(v)

    @model_validator(mode="after")
    def _check_range(self):
        if (self.start is None) != (self.end is None):
            raise ValueError("start and end must be supplied together")
        if self.start is not None and self.start > self.end:
            raise ValueError("start must not be after end")
        return self

    @property
    def has_range(self) -> bool:
        return self.start is not None

    @property
    def effective_count(self) -> int:
        return self.count or Periods.DEFAULT_MINUTES


class EvaluateRequest(BaseModel):
    """Ad-hoc evaluation of one set of measurements."""

    temperature: float = Field(..., validation_alias=_TEMPERATURE)
    ph_level: float = Field(..., validation_alias=_PH)
    ammonia: float = Field(..., validation_alias=_AMMONIA)
