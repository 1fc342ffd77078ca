"""
Configuration for SIPEKA
========================
Runtime settings loaded from ``SIPEKA_*`` environment variables, plus the
logging setup shared by the web server and the watch CLI.
"""

import os
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any

from app.constants import Pagination, Telemetry


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("SIPEKA_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("SIPEKA_SECRET_KEY", "SipekaDevSecretKey"))
    database_path: str = field(default_factory=lambda: os.getenv("SIPEKA_DATABASE_PATH", "database/sipeka.db"))

    DEBUG: bool = field(default_factory=lambda: _env_bool("SIPEKA_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("SIPEKA_LOG_LEVEL", "INFO"))
    audit_log_path: str = field(default_factory=lambda: os.getenv("SIPEKA_AUDIT_LOG_PATH", "logs/audit.log"))
    # Shared secret the trusted front end sends after verifying the auth provider's sign-in
    session_bridge_key: str = field(default_factory=lambda: os.getenv("SIPEKA_SESSION_BRIDGE_KEY", ""), repr=False)

    display_timezone: str = field(
        default_factory=lambda: os.getenv("SIPEKA_DISPLAY_TIMEZONE", Telemetry.DISPLAY_TIMEZONE)
    )
    telemetry_online_seconds: int = field(
        default_factory=lambda: _env_int("SIPEKA_TELEMETRY_ONLINE_SECONDS", Telemetry.ONLINE_WINDOW_SECONDS)
    )
    table_page_size: int = field(
        default_factory=lambda: _env_int("SIPEKA_TABLE_PAGE_SIZE", Pagination.TABLE_PAGE_SIZE)
    )
    logs_limit: int = field(default_factory=lambda: _env_int("SIPEKA_LOGS_LIMIT", Pagination.LOGS_DEFAULT_LIMIT))
    recent_alerts_limit: int = field(
        default_factory=lambda: _env_int("SIPEKA_RECENT_ALERTS_LIMIT", Pagination.RECENT_ALERTS_LIMIT)
    )

    # Default insecure secret key - used only for detection
    _DEFAULT_SECRET_KEY: str = field(default="SipekaDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set SIPEKA_SECRET_KEY environment variable to a secure random value.\n"
                'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        for name in ("telemetry_online_seconds", "table_page_size", "logs_limit", "recent_alerts_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be a positive integer")

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        secret = self.secret_key or os.getenv("FLASK_SECRET_KEY", "")
        if not secret:
            raise RuntimeError(
                "Missing SIPEKA_SECRET_KEY or FLASK_SECRET_KEY environment variable. "
                "Production systems must set an explicit secret key."
            )

        return {
            "ENV": self.environment,
            "SECRET_KEY": secret,
            "DATABASE_PATH": self.database_path,
            "AUDIT_LOG_PATH": self.audit_log_path,
            "SESSION_BRIDGE_KEY": self.session_bridge_key,
            "DEBUG": self.DEBUG,
        }


def setup_logging(debug: bool = False, level: str | None = None) -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicates when create_app is called multiple times
    has_console = any(getattr(h, "name", "") == "sipeka_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "sipeka_file" for h in root.handlers)
    added_handler = False

    # Recommendation texts and status emoji are non-ASCII
    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "sipeka_console"
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file:
        os.makedirs("logs", exist_ok=True)
        file_handler = RotatingFileHandler(
            "logs/sipeka.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "sipeka_file"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"sipeka_console", "sipeka_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    if _env_bool("SIPEKA_SILENCE_WERKZEUG", True):
        logging.getLogger("werkzeug").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
