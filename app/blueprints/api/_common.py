"""
Blueprint Common Utilities
==========================

Shared helper functions for all API blueprints.

Usage:
    from app.blueprints.api._common import (
        get_container, get_json, success, fail, get_user_id,
        get_sensor_data_service, ...
    )
"""
from __future__ import annotations

import logging

from flask import current_app, request
from pydantic import ValidationError

from app.security.auth import current_user_id
from app.utils.http import error_response, success_response

logger = logging.getLogger("api._common")

# ============================================================================
# User Session Utilities
# ============================================================================


def get_user_id() -> str:
    """Current user's uid from the session (routes are guarded by api_login_required)."""
    return current_user_id() or ""


# ============================================================================
# CONTAINER ACCESS
# ============================================================================


def get_container():
    """
    Get the service container from Flask app config.

    Raises:
        RuntimeError: If container is not configured
    """
    container = current_app.config.get("CONTAINER")
    if not container:
        raise RuntimeError("ServiceContainer not found in app config")
    return container


def get_device_service():
    return get_container().device_service


def get_sensor_data_service():
    return get_container().sensor_data_service


def get_activity_log_service():
    return get_container().activity_log_service


def get_dashboard_service():
    return get_container().dashboard_service


# ============================================================================
# REQUEST HELPERS
# ============================================================================


def get_json() -> dict:
    """Parsed JSON body, or an empty dict when missing or not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def query_args() -> dict:
    return request.args.to_dict()


# ============================================================================
# RESPONSE HELPERS
# ============================================================================


def success(data: dict | list | None = None, status: int = 200, *, message: str | None = None):
    """Flask Response with format: {"ok": true, "data": ..., "error": null}"""
    return success_response(data, status, message=message)


def fail(message: str, status: int = 400, *, details: dict | None = None):
    """Flask Response with format: {"ok": false, "data": null, "error": {...}}"""
    return error_response(message, status, details=details)


def invalid_payload(ve: ValidationError, message: str = "Invalid request"):
    """400 carrying pydantic's error list (without non-serialisable context)."""
    return fail(message, 400, details={"errors": ve.errors(include_url=False, include_context=False)})
