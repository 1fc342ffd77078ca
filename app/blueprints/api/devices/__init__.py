"""
Device Registry API Blueprint
=============================

- registry.py: device CRUD, token retrieval and the device detail view

All routes are registered under /api/v1/devices.
"""

from __future__ import annotations

import logging

from flask import Blueprint

devices_api = Blueprint("devices_api", __name__)
logger = logging.getLogger("devices_api")

# Import sub-modules to register their routes
from . import registry  # noqa: E402

_ = (registry,)

__all__ = ["devices_api"]
