import math
from datetime import datetime, timedelta, timezone

import pytest

from app.utils.time import (
    MAX_READING_MS,
    MIN_READING_MS,
    coerce_datetime,
    format_display,
    from_epoch_millis,
    parse_reading_timestamp,
    set_display_timezone,
    start_of_display_day,
    utc_now,
)


@pytest.fixture(autouse=True)
def _jakarta():
    set_display_timezone("Asia/Jakarta")
    yield
    set_display_timezone("Asia/Jakarta")


def test_coerce_datetime_parses_z_suffix():
    dt = coerce_datetime("2026-01-01T00:00:00Z")
    assert dt is not None
    assert dt.tzinfo is not None
    assert dt.utcoffset() == timedelta(0)
    assert dt.isoformat().endswith("+00:00")


def test_coerce_datetime_parses_offset():
    dt = coerce_datetime("2026-01-01T02:00:00+02:00")
    assert dt is not None
    assert dt.utcoffset() == timedelta(0)
    assert dt.hour == 0


def test_coerce_datetime_parses_naive_as_utc():
    dt = coerce_datetime("2026-01-01T00:00:00")
    assert dt is not None
    assert dt.utcoffset() == timedelta(0)
    assert isinstance(utc_now() - dt, timedelta)


def test_format_display_uses_jakarta_24h_clock():
    # 2026-01-01T17:30:00Z is 00.30.00 on Jan 2 in UTC+7
    ts = int(datetime(2026, 1, 1, 17, 30, tzinfo=timezone.utc).timestamp() * 1000)
    assert format_display(ts) == ("02/01/2026", "00.30.00")


def test_parse_reading_timestamp_accepts_epoch_millis():
    assert parse_reading_timestamp(1_792_393_509_000) == 1_792_393_509_000
    assert parse_reading_timestamp(1.5e12) == 1_500_000_000_000


def test_parse_reading_timestamp_reads_naive_strings_in_display_zone():
    naive = parse_reading_timestamp("2026-10-19T14:05:09")
    aware = parse_reading_timestamp("2026-10-19T07:05:09Z")
    assert naive == aware == 1_792_393_509_000


@pytest.mark.parametrize("value", [None, True, "", "not a date", math.nan, math.inf, [1]])
def test_parse_reading_timestamp_rejects_invalid(value):
    assert parse_reading_timestamp(value) is None


@pytest.mark.parametrize("value", [10**16, 1e20, -(10**16), "0001-01-01T00:00:00"])
def test_parse_reading_timestamp_rejects_unrepresentable_instants(value):
    assert parse_reading_timestamp(value) is None


def test_parse_reading_timestamp_range_edges_still_display():
    assert format_display(MAX_READING_MS)[0] == "30/12/9999"
    assert from_epoch_millis(MIN_READING_MS).year == 1
    assert parse_reading_timestamp(MAX_READING_MS) == MAX_READING_MS
    assert parse_reading_timestamp(MAX_READING_MS + 1) is None


def test_start_of_display_day_is_local_midnight():
    # 20:00 UTC on the 19th is already the 20th in Jakarta
    now = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)
    assert start_of_display_day(now) == datetime(2026, 10, 19, 17, 0, tzinfo=timezone.utc)
