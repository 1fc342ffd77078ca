"""Repository facades exposing typed accessors over low-level mixins."""

from infrastructure.database.repositories.activity_log import ActivityRepository
from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.readings import ReadingRepository

__all__ = [
    "ActivityRepository",
    "DeviceRepository",
    "ReadingRepository",
]
