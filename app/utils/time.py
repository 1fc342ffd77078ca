"""Utility functions for time handling.

All stored timestamps are UTC. Sensor readings carry epoch milliseconds;
log events persist ISO-8601 strings with a "+00:00" offset via iso_now().
Display strings are always rendered in the fixed Asia/Jakarta zone (UTC+7),
never in the viewer's locale.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any
from zoneinfo import ZoneInfo

from app.constants import Telemetry

_display_tz = ZoneInfo(Telemetry.DISPLAY_TIMEZONE)

# id-ID locale style: 19/10/2026 and 14.05.09
DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H.%M.%S"


def set_display_timezone(name: str) -> None:
    """Switch the zone used for display strings and naive input times."""
    global _display_tz
    _display_tz = ZoneInfo(name)


def display_timezone() -> ZoneInfo:
    return _display_tz


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def iso_now(*, timespec: str | None = None) -> str:
    """Return current UTC time as an ISO8601 string (timezone-aware)."""
    now = utc_now()
    if timespec:
        return now.isoformat(timespec=timespec)
    return now.isoformat()


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return to_epoch_millis(utc_now())


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(round(dt.timestamp() * 1000))


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def from_epoch_millis(value: int, tz=timezone.utc) -> datetime:
    return (_EPOCH + timedelta(milliseconds=value)).astimezone(tz)


# Instants whose display-zone rendering stays within datetime's year range
MIN_READING_MS = to_epoch_millis(datetime(1, 1, 2, tzinfo=timezone.utc))
MAX_READING_MS = to_epoch_millis(datetime(9999, 12, 30, tzinfo=timezone.utc))


def format_display(timestamp_ms: int) -> tuple[str, str]:
    """Render epoch millis as ``(date, time)`` strings in the display zone (24-hour clock)."""
    local = from_epoch_millis(timestamp_ms, tz=_display_tz)
    return local.strftime(DATE_FORMAT), local.strftime(TIME_FORMAT)


def start_of_display_day(now: datetime | None = None) -> datetime:
    """Midnight of the current day in the display zone, as an aware UTC datetime."""
    now = now or utc_now()
    local = now.astimezone(_display_tz)
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


def coerce_datetime(value: Any) -> datetime | None:
    """
    Coerce value to datetime, returning None on failure.

    Args:
        value: String or datetime to coerce

    Returns:
        Datetime in timezone.utc or None if invalid
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw.replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    else:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


def parse_reading_timestamp(value: Any) -> int | None:
    """
    Parse a caller-supplied reading timestamp into epoch milliseconds.

    Accepts epoch milliseconds (int/float) or an ISO-8601 string. Strings
    without an offset (e.g. ``2026-10-19T14:05`` from a datetime-local input)
    are interpreted in the display zone.

    Returns:
        Epoch milliseconds, or None when the value cannot be parsed into a
        finite instant between years 1 and 9999.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or not MIN_READING_MS <= value <= MAX_READING_MS:
            return None
        return int(value)
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_display_tz)
    try:
        millis = to_epoch_millis(parsed)
    except (OverflowError, OSError, ValueError):
        return None
    return millis if MIN_READING_MS <= millis <= MAX_READING_MS else None


def days_ago(days: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(days=days)
