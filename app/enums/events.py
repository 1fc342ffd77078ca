"""
Activity log enumerations.

LogType and LogSeverity are persisted verbatim in the ActivityLogs table,
so their values are part of the stored data format.
"""

from enum import Enum


class LogType(str, Enum):
    """Kind of activity recorded in the log."""

    ALERT = "alert"
    CONNECTION = "connection"
    DISCONNECTION = "disconnection"
    CONFIGURATION = "configuration"
    THRESHOLD = "threshold"

    def __str__(self) -> str:
        return self.value


class LogSeverity(str, Enum):
    """Severity attached to every log event."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def __str__(self) -> str:
        return self.value


class DateRangeFilter(str, Enum):
    """Date buckets accepted by the log filter (relative to now)."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"

    def __str__(self) -> str:
        return self.value
