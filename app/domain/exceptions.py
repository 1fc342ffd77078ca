"""Centralized exception hierarchy for Sipeka.

All domain and service exceptions inherit from :class:`SipekaError` so that
callers can catch a single base class when they need a broad safety net, yet
still match on specific subclasses where narrower handling is appropriate.

Blueprint-level error handling (see ``app/utils/http.safe_route``) maps these
to the correct HTTP status codes automatically.

Hierarchy
---------
::

    SipekaError (base: maps to 500)
    ├── ValidationError          (400: bad input from caller)
    ├── AccessDeniedError        (403: caller does not own the device/log)
    ├── NotFoundError            (404: entity does not exist)
    ├── ConflictError            (409: duplicate / state conflict)
    └── ServiceError             (500: business-logic failure)
        └── RepositoryError      (500: backend store failure)
"""

from __future__ import annotations


class SipekaError(Exception):
    """Base exception for all Sipeka application errors.

    Parameters
    ----------
    message:
        Human-readable description (logged server-side, **not** leaked to
        the HTTP client unless the exception class opts in).
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── Client errors (4xx) ──────────────────────────────────────────────


class ValidationError(SipekaError):
    """Caller supplied invalid or incomplete input (HTTP 400)."""

    http_status: int = 400


class AccessDeniedError(SipekaError):
    """Ownership check failed: user/device mismatch or missing identifiers (HTTP 403)."""

    http_status: int = 403


class NotFoundError(SipekaError):
    """Requested entity does not exist (HTTP 404)."""

    http_status: int = 404


class ConflictError(SipekaError):
    """Operation conflicts with existing state (HTTP 409)."""

    http_status: int = 409


# ── Server errors (5xx) ──────────────────────────────────────────────


class ServiceError(SipekaError):
    """Business-logic failure in a service method (HTTP 500)."""

    http_status: int = 500


class RepositoryError(ServiceError):
    """Backend store failure, raised with the original driver message preserved (HTTP 500)."""

    http_status: int = 500
