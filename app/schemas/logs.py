"""
Log Schemas
===========

Query validation for the activity log listing.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.domain.log_event import LogFilters
from app.enums import LogSeverity, LogType


class LogFiltersQuery(BaseModel):
    search: Optional[str] = Field(default=None, max_length=200)
    type: Optional[LogType] = None
    severity: Optional[LogSeverity] = None
    date_range: Optional[str] = Field(default=None, description="today | week | month | all")
    limit: Optional[int] = Field(default=None, ge=1, le=1000)

    @field_validator("search", "type", "severity", "date_range", mode="before")
    def _blank_means_unfiltered(cls, v):
        # "all" is the select box's catch-all option
        if v in ("", "all"):
            return None
        return v

    @property
    def is_filtered(self) -> bool:
        return any(v is not None for v in (self.search, self.type, self.severity, self.date_range))

    def to_filters(self) -> LogFilters:
        return LogFilters(
            search_term=self.search,
            type=self.type,
            severity=self.severity,
            date_range=self.date_range,
        )
