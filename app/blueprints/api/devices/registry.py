from __future__ import annotations

from flask import Response
from pydantic import ValidationError

from app.blueprints.api._common import (
    fail,
    get_dashboard_service,
    get_device_service,
    get_json,
    get_user_id,
    invalid_payload,
    success,
)
from app.blueprints.api.devices import devices_api
from app.schemas import CreateDeviceRequest, UpdateDeviceRequest
from app.security.auth import api_login_required
from app.utils.http import safe_route


@devices_api.get("")
@api_login_required
@safe_route("Failed to list devices")
def list_devices() -> Response:
    devices = get_device_service().fetch_all_devices(get_user_id())
    return success([d.to_dict() for d in devices])


@devices_api.post("")
@api_login_required
@safe_route("Failed to register device")
def create_device() -> Response:
    try:
        body = CreateDeviceRequest(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid device payload")

    device = get_device_service().add_device(
        get_user_id(),
        name=body.name,
        location=body.location,
        coordinates=body.coordinates.to_domain() if body.coordinates else None,
        auth_token=body.auth_token,
        custom_id=body.custom_id,
    )
    return success(device.to_dict(), 201, message="Device created")


@devices_api.get("/<device_id>")
@api_login_required
@safe_route("Failed to get device")
def get_device(device_id: str) -> Response:
    device = get_device_service().fetch_device(get_user_id(), device_id)
    if device is None:
        return fail("Device not found", 404)
    return success(device.to_dict())


@devices_api.patch("/<device_id>")
@api_login_required
@safe_route("Failed to update device")
def update_device(device_id: str) -> Response:
    try:
        body = UpdateDeviceRequest(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid device payload")

    device = get_device_service().update_device(get_user_id(), device_id, body.to_changes())
    return success(device.to_dict(), message="Device updated")


@devices_api.delete("/<device_id>")
@api_login_required
@safe_route("Failed to delete device")
def delete_device(device_id: str) -> Response:
    get_device_service().delete_device(get_user_id(), device_id)
    return success({"device_id": device_id}, message="Device deleted")


@devices_api.post("/<device_id>/token")
@api_login_required
@safe_route("Failed to retrieve device token")
def device_token(device_id: str) -> Response:
    token = get_device_service().generate_device_token(get_user_id(), device_id)
    return success(token.to_dict())


@devices_api.get("/<device_id>/detail")
@api_login_required
@safe_route("Failed to load device detail")
def device_detail(device_id: str) -> Response:
    return success(get_dashboard_service().device_detail(get_user_id(), device_id))
