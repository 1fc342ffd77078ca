"""
Application Constants
=====================

Centralized constants to replace magic numbers throughout the codebase.
Organized by domain for easy discovery and maintenance.

Usage:
    from app.constants import Telemetry, Polling, Pagination
"""

# =============================================================================
# Telemetry
# =============================================================================


class Telemetry:
    """Device liveness rules."""

    ONLINE_WINDOW_SECONDS = 3 * 60  # latest reading younger than this => online
    DISPLAY_TIMEZONE = "Asia/Jakarta"


# =============================================================================
# Polling
# =============================================================================


class Polling:
    """Refetch cadence keyed by the selected time window (minutes)."""

    # (max window minutes, interval seconds); first match wins
    CADENCE = (
        (1, 5),
        (5, 15),
        (60, 60),
    )
    STOP_JOIN_TIMEOUT = 5.0  # seconds


class Periods:
    """Selectable time windows: label -> minutes. A window of N minutes requests N points."""

    OPTIONS = (
        ("1 Menit", 1),
        ("5 Menit", 5),
        ("30 Menit", 30),
        ("1 Jam", 60),
        ("3 Jam", 3 * 60),
        ("6 Jam", 6 * 60),
        ("12 Jam", 12 * 60),
        ("24 Jam", 24 * 60),
    )
    DEFAULT_MINUTES = 5


# =============================================================================
# Pagination / limits
# =============================================================================


class Pagination:
    """List sizes used by the API."""

    TABLE_PAGE_SIZE = 15
    LOGS_DEFAULT_LIMIT = 100
    RECENT_ALERTS_LIMIT = 5
    MAX_READINGS_COUNT = 10_000


# =============================================================================
# Devices
# =============================================================================


class DeviceDefaults:
    """Device registration defaults."""

    GENERATED_ID_LENGTH = 10
    GENERATED_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
    DEFAULT_COORDINATES = (0.0, 0.0)


# =============================================================================
# Export
# =============================================================================


class CsvExport:
    """CSV export format."""

    HEADERS = ("Waktu", "Suhu (°C)", "pH Level", "Amonia (ppm)")
    FILENAME_TEMPLATE = "data_sensor_{token}_{stamp}.csv"
