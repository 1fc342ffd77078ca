from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import Response, jsonify

from app.utils.time import iso_now

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Generic user-facing messages, never leak internals
# ---------------------------------------------------------------------------
_GENERIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    409: "Conflict",
    500: "An internal error occurred",
}


def safe_error(
    exc: BaseException,
    status: int = 500,
    *,
    context: str = "",
) -> Response:
    """Return a generic error response while logging the real exception.

    Parameters
    ----------
    exc:
        The caught exception, logged server-side and never sent to the client.
    status:
        HTTP status code for the response (determines the generic message).
    context:
        Optional context logged alongside *exc*, e.g. ``"exporting readings"``.
    """
    _log.error("API error [%s] %s: %s", status, context, exc, exc_info=exc)
    message = _GENERIC_MESSAGES.get(status, _GENERIC_MESSAGES[500])
    return error_response(message, status)


def success_response(
    data: dict | list | None = None,
    status: int = 200,
    *,
    message: str | None = None,
) -> Response:
    payload: dict[str, Any] = {"ok": True, "data": data, "error": None}
    if message is not None:
        payload["message"] = message
    response = jsonify(payload)
    response.status_code = status
    return response


def error_response(
    message: str,
    status: int = 500,
    *,
    details: dict | None = None,
) -> Response:
    payload: dict[str, Any] = {"message": message, "timestamp": iso_now()}
    if details:
        payload.update(details)
    response_body: dict[str, Any] = {
        "ok": False,
        "data": None,
        "error": payload,
        "message": message,
    }
    if details:
        response_body["details"] = details
    response = jsonify(response_body)
    response.status_code = status
    return response


def error_from_exception(exc: BaseException, fallback_message: str = "") -> Response:
    """Map a SipekaError to its status; anything else becomes a generic 500."""
    from app.domain.exceptions import SipekaError

    if isinstance(exc, SipekaError):
        status = exc.http_status
        if status >= 500:
            return safe_error(exc, status, context=fallback_message)
        details = {"detail": exc.detail} if exc.detail else None
        return error_response(str(exc) or fallback_message or _GENERIC_MESSAGES.get(status, ""), status, details=details)
    return safe_error(exc, 500, context=fallback_message)


# ---------------------------------------------------------------------------
# Route decorator, eliminates per-route try/except boilerplate
# ---------------------------------------------------------------------------


def safe_route(error_message: str = "An internal error occurred") -> Callable:
    """Decorator that wraps a Flask route handler with standardized error handling.

    Catches :class:`~app.domain.exceptions.SipekaError` subclasses and maps
    them to the correct HTTP status via ``exc.http_status``. Any other
    ``Exception`` is logged and returns a generic 500.

    Usage::

        @readings_api.get("/<token>")
        @safe_route("Failed to load readings")
        def list_readings(token):
            ...
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return fn(*args, **kwargs)
            except Exception as exc:
                return error_from_exception(exc, error_message)

        return wrapper

    return decorator
