import secrets
from functools import wraps
from typing import Callable, TypeVar, cast

from flask import request, session

from app.utils.http import error_response

F = TypeVar("F", bound=Callable[..., object])

BRIDGE_KEY_HEADER = "X-Session-Bridge-Key"


def api_login_required(view_func: F) -> F:
    """Ensure the user is authenticated for API endpoints (returns JSON 401)."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if not current_user_id():
            return error_response(
                "Authentication required",
                status=401,
                details={"code": "UNAUTHORIZED"},
            )
        return view_func(*args, **kwargs)

    return cast(F, wrapped)


def bridge_key_valid(expected: str | None) -> bool:
    """True when the request carries the configured session bridge key.

    An unset key disables the bridge entirely.
    """
    if not expected:
        return False
    supplied = request.headers.get(BRIDGE_KEY_HEADER, "")
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def current_user() -> dict | None:
    """Identity stored by the session bridge: ``{uid, displayName, email}``."""
    user = session.get("user")
    return user if isinstance(user, dict) else None


def current_user_id() -> str | None:
    user = current_user()
    return user.get("uid") if user else None
