from __future__ import annotations

import atexit
import logging
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from app.blueprints.api.dashboard import dashboard_api, status_api
from app.blueprints.api.devices import devices_api
from app.blueprints.api.logs import logs_api
from app.blueprints.api.readings import readings_api
from app.blueprints.auth.routes import auth_bp
from app.config import load_config, setup_logging
from app.utils.time import set_display_timezone

logger = logging.getLogger(__name__)


def create_app(config_overrides: dict[str, Any] | None = None) -> Flask:
    config = load_config()
    if config_overrides:
        for key, value in config_overrides.items():
            setattr(config, key.lower(), value)

    setup_logging(debug=config.DEBUG, level=config.log_level)
    set_display_timezone(config.display_timezone)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())
    flask_app.config["SESSION_COOKIE_HTTPONLY"] = True
    flask_app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    flask_app.config["SESSION_COOKIE_SECURE"] = config.environment == "production"
    flask_app.json.ensure_ascii = False

    from app.services.container import ServiceContainer

    container = ServiceContainer.build(config)
    container.database.init_app(flask_app)
    flask_app.config["CONTAINER"] = container
    atexit.register(container.shutdown)

    # Domain exceptions carry their own ``http_status``; anything else on
    # /api/ or /auth/ becomes a generic JSON 500 instead of a stack trace.
    @flask_app.errorhandler(Exception)
    def _handle_unhandled(exc):
        from app.utils.http import error_from_exception, error_response

        if isinstance(exc, HTTPException):
            if not request.path.startswith(("/api/", "/auth/")):
                return exc
            status = int(exc.code or 500)
            if status < 500:
                return error_response(exc.description or "Request failed", status)
        return error_from_exception(exc, "unhandled")

    V1 = "/api/v1"
    flask_app.register_blueprint(auth_bp, url_prefix="/auth")
    flask_app.register_blueprint(devices_api, url_prefix=f"{V1}/devices")
    flask_app.register_blueprint(readings_api, url_prefix=f"{V1}/readings")
    flask_app.register_blueprint(logs_api, url_prefix=f"{V1}/logs")
    flask_app.register_blueprint(dashboard_api, url_prefix=f"{V1}/dashboard")
    flask_app.register_blueprint(status_api, url_prefix=f"{V1}/status")

    logger.info("Sipeka app created (env=%s, db=%s)", config.environment, config.database_path)
    return flask_app
