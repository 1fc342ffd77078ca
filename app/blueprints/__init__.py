"""Flask blueprints: the JSON API under /api/v1 and the session bridge under /auth."""
