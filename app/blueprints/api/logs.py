"""
Activity Log API
================

Listing (optionally filtered), recent alerts and deletion of log events.
"""

from __future__ import annotations

from flask import Blueprint, Response
from pydantic import ValidationError

from app.blueprints.api._common import (
    get_activity_log_service,
    get_user_id,
    invalid_payload,
    query_args,
    success,
)
from app.security.auth import api_login_required
from app.utils.http import safe_route

logs_api = Blueprint("logs_api", __name__)


@logs_api.get("")
@api_login_required
@safe_route("Failed to load logs")
def list_logs() -> Response:
    from app.schemas import LogFiltersQuery

    try:
        query = LogFiltersQuery(**query_args())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid log filters")

    service = get_activity_log_service()
    if query.is_filtered:
        events = service.fetch_filtered_logs(get_user_id(), query.to_filters())
        if query.limit:
            events = events[: query.limit]
    else:
        events = service.fetch_logs(get_user_id(), limit=query.limit)
    return success([e.to_dict() for e in events])


@logs_api.get("/alerts")
@api_login_required
@safe_route("Failed to load recent alerts")
def recent_alerts() -> Response:
    events = get_activity_log_service().fetch_recent_alerts(get_user_id())
    return success([e.to_dict() for e in events])


@logs_api.delete("/<int:log_id>")
@api_login_required
@safe_route("Failed to delete log event")
def delete_log(log_id: int) -> Response:
    get_activity_log_service().delete_log_event(get_user_id(), log_id)
    return success({"id": log_id}, message="Log event deleted")
