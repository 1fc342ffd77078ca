"""Versioned JSON API blueprints."""
