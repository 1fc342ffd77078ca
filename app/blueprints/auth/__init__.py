"""Session bridge for the external auth provider."""

from app.blueprints.auth.routes import auth_bp

__all__ = ["auth_bp"]
