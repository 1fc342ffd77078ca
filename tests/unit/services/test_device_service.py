import pytest

from app.domain.device import Coordinates
from app.domain.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from app.enums import LogSeverity, LogType
from app.services.application.device_service import generate_device_id


def test_generated_ids_are_lowercase_alphanumeric():
    device_id = generate_device_id()
    assert len(device_id) == 10
    assert device_id.isalnum() and device_id == device_id.lower()


class TestAddDevice:
    def test_defaults(self, device_service):
        device = device_service.add_device("u1", "  Kolam Lele  ")
        assert device.name == "Kolam Lele"
        assert device.coordinates == Coordinates(0.0, 0.0)
        assert device.token == device.id
        assert device.registration_date is not None

    def test_custom_id_and_token(self, device_service):
        device = device_service.add_device("u1", "Kolam", custom_id="kolam01", auth_token="secret-tok")
        assert device.id == "kolam01"
        assert device.token == "secret-tok"
        assert device_service.find_owned_by_token("u1", "secret-tok") == device

    def test_duplicate_custom_id_conflicts(self, device_service):
        device_service.add_device("u1", "Kolam", custom_id="kolam01")
        with pytest.raises(ConflictError):
            device_service.add_device("u2", "Lain", custom_id="kolam01")

    def test_token_already_in_use_conflicts(self, device_service):
        device_service.add_device("u1", "Kolam", custom_id="kolam01")
        with pytest.raises(ConflictError):
            device_service.add_device("u2", "Mine", custom_id="x1", auth_token="kolam01")
        assert device_service.find_owned_by_token("u2", "kolam01") is None

    def test_custom_id_equal_to_foreign_token_conflicts(self, device_service):
        device_service.add_device("u1", "Kolam", custom_id="kolam01", auth_token="tok-1")
        with pytest.raises(ConflictError):
            device_service.add_device("u2", "Mine", custom_id="tok-1")

    def test_requires_user_and_name(self, device_service):
        with pytest.raises(ValidationError):
            device_service.add_device("", "Kolam")
        with pytest.raises(ValidationError):
            device_service.add_device("u1", "   ")

    def test_logs_configuration_event_and_audits(self, device_service, activity_log_service, mock_audit_logger):
        device = device_service.add_device("u1", "Kolam")

        [event] = activity_log_service.fetch_logs("u1")
        assert (event.type, event.severity, event.message) == (LogType.CONFIGURATION, LogSeverity.LOW, "Device created")
        assert event.device == "Kolam"
        mock_audit_logger.log_event.assert_called_once_with(
            actor="u1", action="device.create", resource=f"device:{device.id}", outcome="success"
        )


class TestReads:
    def test_list_only_own_devices(self, device_service):
        device_service.add_device("u1", "A")
        device_service.add_device("u2", "B")
        assert [d.name for d in device_service.fetch_all_devices("u1")] == ["A"]

    def test_foreign_device_is_absent(self, device_service):
        device = device_service.add_device("u1", "A")
        assert device_service.fetch_device("u2", device.id) is None
        assert device_service.find_owned_by_token("u2", device.token) is None


class TestMutations:
    def test_update_fields(self, device_service):
        device = device_service.add_device("u1", "A")
        updated = device_service.update_device(
            "u1", device.id, {"location": "Bogor", "coordinates": Coordinates(-6.5, 106.8)}
        )
        assert updated.name == "A"
        assert updated.location == "Bogor"
        assert updated.coordinates == Coordinates(-6.5, 106.8)

    def test_update_rejects_empty_changes(self, device_service):
        device = device_service.add_device("u1", "A")
        with pytest.raises(ValidationError):
            device_service.update_device("u1", device.id, {})

    def test_update_foreign_or_missing(self, device_service):
        device = device_service.add_device("u1", "A")
        with pytest.raises(AccessDeniedError):
            device_service.update_device("u2", device.id, {"name": "B"})
        with pytest.raises(NotFoundError):
            device_service.update_device("u1", "nope", {"name": "B"})

    def test_delete_removes_reading_stream(self, seed, device_service, readings_repo):
        device = device_service.add_device("u1", "A", custom_id="kolam01")
        seed.insert_reading(device.token, timestamp_ms=1_000)
        seed.insert_reading("other-stream", timestamp_ms=1_000)

        device_service.delete_device("u1", device.id)
        assert device_service.fetch_device("u1", device.id) is None
        assert readings_repo.latest(device.token, 10) == []
        assert len(readings_repo.latest("other-stream", 10)) == 1

    def test_reused_id_starts_with_empty_stream(self, seed, device_service, sensor_data_service):
        old = device_service.add_device("u1", "A", custom_id="kolam01")
        seed.insert_reading(old.token, timestamp_ms=1_000)
        device_service.delete_device("u1", old.id)

        new = device_service.add_device("u2", "B", custom_id="kolam01")
        assert new.token == old.token
        assert sensor_data_service.fetch_latest("u2", new.token, 10) == []

    def test_delete_logs_medium_severity(self, device_service, activity_log_service):
        device = device_service.add_device("u1", "A")
        device_service.delete_device("u1", device.id)
        latest = activity_log_service.fetch_logs("u1")[0]
        assert (latest.message, latest.severity) == ("Device deleted", LogSeverity.MEDIUM)

    def test_token_retrieval(self, device_service):
        device = device_service.add_device("u1", "A", auth_token="tok-1")
        token = device_service.generate_device_token("u1", device.id)
        assert token.to_dict() == {"token": "tok-1", "device_id": device.id}
        with pytest.raises(AccessDeniedError):
            device_service.generate_device_token("u2", device.id)
