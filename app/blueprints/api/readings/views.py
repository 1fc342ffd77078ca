from __future__ import annotations

from flask import Response, request
from pydantic import ValidationError

from app.blueprints.api._common import (
    fail,
    get_dashboard_service,
    get_sensor_data_service,
    get_user_id,
    invalid_payload,
    query_args,
    success,
)
from app.blueprints.api.readings import readings_api
from app.blueprints.api.readings.records import load_readings
from app.schemas import ReadingsQuery
from app.security.auth import api_login_required
from app.utils.http import safe_route


def _parse_query():
    args = query_args()
    args.pop("page", None)
    args.pop("page_size", None)
    return ReadingsQuery(**args)


@readings_api.get("/<token>/metadata")
@api_login_required
@safe_route("Failed to load device metadata")
def reading_metadata(token: str) -> Response:
    return success(get_sensor_data_service().fetch_metadata(get_user_id(), token).to_dict())


@readings_api.get("/<token>/table")
@api_login_required
@safe_route("Failed to load reading table")
def reading_table(token: str) -> Response:
    try:
        query = _parse_query()
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading query")
    page = request.args.get("page", 1, type=int)
    page_size = request.args.get("page_size", None, type=int)
    result = get_dashboard_service().table_page(load_readings(token, query), page=page, page_size=page_size)
    return success(result.to_dict())


@readings_api.get("/<token>/chart")
@api_login_required
@safe_route("Failed to load chart data")
def reading_chart(token: str) -> Response:
    try:
        query = _parse_query()
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading query")
    return success(get_dashboard_service().chart_series(load_readings(token, query)))


@readings_api.get("/<token>/export.csv")
@api_login_required
@safe_route("Failed to export readings")
def export_readings(token: str):
    try:
        query = _parse_query()
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid reading query")
    readings = load_readings(token, query)
    if not readings:
        return fail("No data available to export", 400)
    export = get_sensor_data_service().export_csv(get_user_id(), token, readings)
    return Response(
        export.content,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )
