"""
Domain Value Objects Package
=============================
Immutable value objects and pure rules for water-quality monitoring.

Value objects are defined only by their attributes; the status evaluator in
``water_quality`` has no I/O and no dependency on the persistence layer.
"""

from .device import Coordinates, Device, DeviceToken
from .log_event import LogEvent, LogFilters
from .sensor_reading import NewReading, ReadingUpdate, SensorReading
from .water_quality import ReadingEvaluation, StatusDetail, StatusDisplay, evaluate, evaluate_reading

__all__ = [
    # Devices
    "Coordinates",
    "Device",
    "DeviceToken",
    # Activity log
    "LogEvent",
    "LogFilters",
    # Readings
    "NewReading",
    "ReadingUpdate",
    "SensorReading",
    # Status evaluation
    "ReadingEvaluation",
    "StatusDetail",
    "StatusDisplay",
    "evaluate",
    "evaluate_reading",
]
