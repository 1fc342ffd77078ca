"""
Enums Module
============

This module provides enumeration types for the Sipeka application.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.common import StatusLevel, TelemetryStatus
from app.enums.events import DateRangeFilter, LogSeverity, LogType

__all__ = [
    "DateRangeFilter",
    "LogSeverity",
    "LogType",
    "StatusLevel",
    "TelemetryStatus",
]
