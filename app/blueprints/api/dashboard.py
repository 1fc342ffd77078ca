"""
Dashboard API
=============

Overview summary across the user's devices, the selectable time windows,
and ad-hoc evaluation of a set of measurements.
"""

from __future__ import annotations

from flask import Blueprint, Response
from pydantic import ValidationError

from app.blueprints.api._common import get_dashboard_service, get_json, get_user_id, invalid_payload, success
from app.domain.water_quality import evaluate
from app.schemas import EvaluateRequest
from app.security.auth import api_login_required
from app.utils.http import safe_route

dashboard_api = Blueprint("dashboard_api", __name__)
status_api = Blueprint("status_api", __name__)


@dashboard_api.get("/overview")
@api_login_required
@safe_route("Failed to load dashboard overview")
def overview() -> Response:
    return success(get_dashboard_service().overview(get_user_id()))


@dashboard_api.get("/periods")
@safe_route("Failed to load periods")
def periods() -> Response:
    return success(get_dashboard_service().periods())


@status_api.post("/evaluate")
@safe_route("Failed to evaluate reading")
def evaluate_measurements() -> Response:
    try:
        body = EvaluateRequest(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid measurement payload")
    return success(evaluate(body.ph_level, body.temperature, body.ammonia).to_dict())
