"""
Session bridge
==============

Sign-in happens with the external auth provider. The trusted front end that
verified the sign-in posts the provider's user object here, together with the
shared ``X-Session-Bridge-Key`` header, and the backend keeps it in the Flask
session. No credentials pass through this service.
"""

from __future__ import annotations

from flask import Blueprint, current_app, request, session
from pydantic import ValidationError

from app.blueprints.api._common import get_json, invalid_payload, success
from app.security.auth import bridge_key_valid, current_user
from app.utils.http import error_response

auth_bp = Blueprint("auth", __name__)


def _audit(actor: str, action: str) -> None:
    container = current_app.config.get("CONTAINER")
    if container is not None:
        container.audit_logger.log_event(actor=actor, action=action, resource="session", outcome="success")


@auth_bp.post("/session")
def open_session():
    from app.schemas import SessionUserSchema

    if not bridge_key_valid(current_app.config.get("SESSION_BRIDGE_KEY")):
        current_app.logger.warning("Rejected session bridge call from %s", request.remote_addr)
        return error_response("Session bridge key missing or invalid", 401, details={"code": "UNAUTHORIZED"})

    try:
        user = SessionUserSchema(**get_json())
    except ValidationError as ve:
        return invalid_payload(ve, "Invalid session payload")

    # Regenerate session to prevent session fixation
    session.clear()
    session["user"] = user.to_session()
    _audit(user.uid, "login")
    current_app.logger.info("Session opened for %s", user.uid)
    return success(user.to_session(), message="Session started")


@auth_bp.get("/session")
def read_session():
    user = current_user()
    if user is None:
        return error_response("Authentication required", 401, details={"code": "UNAUTHORIZED"})
    return success(user)


@auth_bp.delete("/session")
def close_session():
    user = current_user()
    session.clear()
    if user is not None:
        _audit(user.get("uid", ""), "logout")
    return success({"signed_out": True})
