from app.domain.device import Coordinates, Device
from app.domain.log_event import LogEvent
from app.domain.sensor_reading import ReadingUpdate, SensorReading, generate_record_key
from app.enums import LogSeverity, LogType

# 2026-10-19T07:05:09Z == 14.05.09 in Asia/Jakarta
TS = 1_792_393_509_000


def test_record_keys_sort_by_time():
    earlier = generate_record_key(TS)
    later = generate_record_key(TS + 1)
    assert earlier < later
    assert earlier[:13] == f"{TS:013d}"


def test_record_keys_are_unique_for_same_timestamp():
    assert generate_record_key(TS) != generate_record_key(TS)


def test_reading_formats_in_display_zone():
    reading = SensorReading("k", TS, 27.0, 7.2, 0.1)
    assert reading.time_formatted == "14.05.09"
    assert reading.date_formatted == "19/10/2026 14.05.09"

    data = reading.to_dict()
    assert data["timestamp"] == TS
    assert data["record_key"] == "k"


def test_reading_update_only_reports_supplied_fields():
    update = ReadingUpdate(ph_level=6.9)
    assert update.changes() == {"ph_level": 6.9}
    assert not update.is_empty
    assert ReadingUpdate().is_empty


def test_device_token_falls_back_to_id():
    device = Device("abc", "Kolam", "", Coordinates(), "u1", auth_token="")
    assert device.token == "abc"


def test_device_from_row_and_formatted_registration():
    device = Device.from_row(
        {
            "id": "abc",
            "name": "Kolam",
            "location": None,
            "lat": None,
            "lng": 106.8,
            "user_id": "u1",
            "auth_token": "tok",
            "registration_date": "2026-10-19T07:05:09+00:00",
        }
    )
    assert device.location == ""
    assert device.coordinates == Coordinates(0.0, 106.8)
    assert device.registration_date_formatted == "19/10/2026 14.05.09"
    assert device.to_dict()["auth_token"] == "tok"


def test_log_event_search_matches_message_or_device():
    event = LogEvent(1, LogType.ALERT, "Kualitas air Bahaya", LogSeverity.HIGH, "t", "d1", "Kolam Nila", "u1")
    assert event.matches("bahaya")
    assert event.matches("NILA")
    assert not event.matches("lele")
