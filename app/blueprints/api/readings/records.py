from __future__ import annotations

from flask import Response
from pydantic import ValidationError

from app.blueprints.api._common import (
    get_json,
    get_sensor_data_service,
    get_user_id,
    invalid_payload,
    query_args,
    success,
)
from app.blueprints.api.readings import readings_api
from app.domain.sensor_reading import SensorReading
from app.schemas import CreateReadingRequest, ReadingsQuery, UpdateReadingRequest
from app.security.auth import api_login_required
from app.utils.http import safe_route


def load_readings(token: str, query: ReadingsQuery) -> list[SensorReading]:
    """Range query when start/end are given, otherwise the latest ``count`` readings."""
    service = get_sensor_data_service()
    if query.has_range:
        return service.fetch_by_range(get_user_id(), token, query.start, query.end)
    return service.fetch_latest(get_user_id(), token, query.effective_count)


@readings_api.get("/<token>")
@api_login_required
@safe_route("Failed to load readings")
def list_readings(token: str) -> Response:
    try:
        query = ReadingsQuery(**query_args())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading query")
    return success([r.to_dict() for r in load_readings(token, query)])


@readings_api.post("/<token>")
@api_login_required
@safe_route("Failed to add reading")
def add_reading(token: str) -> Response:
    try:
        body = CreateReadingRequest(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading payload")
    reading = get_sensor_data_service().add(get_user_id(), token, body.to_domain())
    return success(reading.to_dict(), 201, message="Reading added")


@readings_api.delete("/<token>")
@api_login_required
@safe_route("Failed to delete readings")
def delete_all_readings(token: str) -> Response:
    removed = get_sensor_data_service().delete_all(get_user_id(), token)
    return success({"deleted": removed})


@readings_api.patch("/<token>/<record_key>")
@api_login_required
@safe_route("Failed to update reading")
def edit_reading(token: str, record_key: str) -> Response:
    try:
        body = UpdateReadingRequest(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading payload")
    reading = get_sensor_data_service().edit_by_key(get_user_id(), token, record_key, body.to_update())
    return success(reading.to_dict(), message="Reading updated")


@readings_api.delete("/<token>/<record_key>")
@api_login_required
@safe_route("Failed to delete reading")
def delete_reading(token: str, record_key: str) -> Response:
    get_sensor_data_service().delete_by_key(get_user_id(), token, record_key)
    return success({"record_key": record_key}, message="Reading deleted")
