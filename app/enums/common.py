"""
Common Enumerations
====================

Status vocabulary shared by the evaluator, services and API.
"""

from enum import Enum


class StatusLevel(str, Enum):
    """
    Three-level water quality status.
    Used by: water_quality evaluator, dashboard overview, alert logging
    """

    AMAN = "Aman"
    WASPADA = "Waspada"
    BAHAYA = "Bahaya"

    @property
    def severity(self) -> int:
        """Rank used when combining statuses (higher is worse)."""
        return _SEVERITY_RANK[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {
    StatusLevel.AMAN: 0,
    StatusLevel.WASPADA: 1,
    StatusLevel.BAHAYA: 2,
}


class TelemetryStatus(str, Enum):
    """
    Device liveness inferred from the age of its latest reading.
    Used by: sensor_data_service, dashboard overview
    """

    ONLINE = "online"
    OFFLINE = "offline"

    def __str__(self) -> str:
        return self.value
