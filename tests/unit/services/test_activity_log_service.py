from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from app.domain.exceptions import AccessDeniedError, NotFoundError, RepositoryError, ValidationError
from app.domain.log_event import LogFilters
from app.enums import LogSeverity, LogType
from app.services.application.activity_log_service import ActivityLogService
from app.utils.time import utc_now


def _iso(dt):
    return dt.isoformat(timespec="microseconds")


def test_add_log_event_stamps_utc_time(activity_log_service):
    event = activity_log_service.add_log_event("u1", "d1", "alert", "pH rendah", "high", device_name="Kolam")
    assert event.type == LogType.ALERT
    assert event.severity == LogSeverity.HIGH
    assert event.timestamp.endswith("+00:00")
    assert activity_log_service.fetch_logs("u1")[0] == event


def test_add_log_event_rejects_unknown_type_or_missing_user(activity_log_service):
    with pytest.raises(ValidationError):
        activity_log_service.add_log_event("u1", "d1", "explosion", "x", "high")
    with pytest.raises(ValidationError):
        activity_log_service.add_log_event("u1", "d1", "alert", "x", "critical")
    with pytest.raises(ValidationError):
        activity_log_service.add_log_event("", "d1", "alert", "x", "high")


def test_fetch_logs_newest_first_and_limited(activity_log_service):
    for i in range(3):
        activity_log_service.add_log_event("u1", "d1", "connection", f"event {i}", "low")
    logs = activity_log_service.fetch_logs("u1", limit=2)
    assert [e.message for e in logs] == ["event 2", "event 1"]


def test_fetch_logs_is_per_user(activity_log_service):
    activity_log_service.add_log_event("u1", "d1", "connection", "mine", "low")
    activity_log_service.add_log_event("u2", "d2", "connection", "theirs", "low")
    assert [e.message for e in activity_log_service.fetch_logs("u1")] == ["mine"]


def test_filtered_logs_combine_filters(seed, activity_log_service):
    now = utc_now()
    seed.insert_log("u1", type="alert", severity="high", message="pH Bahaya", timestamp=_iso(now))
    seed.insert_log("u1", type="alert", severity="high", message="old", timestamp=_iso(now - timedelta(days=10)))
    seed.insert_log("u1", type="threshold", severity="medium", message="Suhu Waspada", timestamp=_iso(now))
    seed.insert_log("u1", device_name="Kolam Nila", message="sambung", timestamp=_iso(now))

    week_alerts = activity_log_service.fetch_filtered_logs(
        "u1", LogFilters(type=LogType.ALERT, date_range="week")
    )
    assert [e.message for e in week_alerts] == ["pH Bahaya"]

    by_device = activity_log_service.fetch_filtered_logs("u1", LogFilters(search_term="nila"))
    assert [e.message for e in by_device] == ["sambung"]

    month = activity_log_service.fetch_filtered_logs("u1", LogFilters(severity=LogSeverity.HIGH, date_range="month"))
    assert {e.message for e in month} == {"pH Bahaya", "old"}


def test_filter_all_date_range_keeps_everything(seed, activity_log_service):
    seed.insert_log("u1", timestamp="2020-01-01T00:00:00.000000+00:00")
    assert len(activity_log_service.fetch_filtered_logs("u1", LogFilters(date_range="all"))) == 1


def test_recent_alerts_only_high_and_medium(activity_log_service):
    activity_log_service.add_log_event("u1", "d1", "alert", "a", "high")
    activity_log_service.add_log_event("u1", "d1", "configuration", "b", "low")
    activity_log_service.add_log_event("u1", "d1", "threshold", "c", "medium")
    assert [e.message for e in activity_log_service.fetch_recent_alerts("u1")] == ["c", "a"]


def test_listing_degrades_to_empty_on_store_failure():
    repo = MagicMock()
    repo.recent.side_effect = RepositoryError("database is locked")
    service = ActivityLogService(repo)
    assert service.fetch_logs("u1") == []
    assert service.fetch_recent_alerts("u1") == []
    assert service.fetch_filtered_logs("u1", LogFilters(search_term="x")) == []


def test_delete_log_event_checks_owner(activity_log_service):
    event = activity_log_service.add_log_event("u1", "d1", "alert", "a", "high")
    with pytest.raises(AccessDeniedError):
        activity_log_service.delete_log_event("u2", event.id)
    activity_log_service.delete_log_event("u1", event.id)
    assert activity_log_service.fetch_logs("u1") == []
    with pytest.raises(NotFoundError):
        activity_log_service.delete_log_event("u1", event.id)


def test_filtered_listing_warns_when_scan_limit_reached(caplog):
    row = {
        "id": 1,
        "type": "alert",
        "message": "pH Bahaya",
        "severity": "high",
        "timestamp": "2026-10-19T00:00:00.000000+00:00",
        "user_id": "u1",
    }
    repo = MagicMock()
    repo.recent.return_value = [dict(row, id=i) for i in range(10_000)]
    service = ActivityLogService(repo)

    with caplog.at_level("WARNING", logger="app.services.application.activity_log_service"):
        events = service.fetch_filtered_logs("u1", LogFilters(date_range="all"))

    assert len(events) == 10_000
    assert "scan limit" in caplog.text
