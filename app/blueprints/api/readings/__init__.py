"""
Sensor Readings API Blueprint
=============================

- records.py: list, add, edit and delete readings of one device stream
- views.py: telemetry metadata, paginated table, chart series and CSV export

Streams are addressed by device token under /api/v1/readings/<token>.
"""

from __future__ import annotations

import logging

from flask import Blueprint

readings_api = Blueprint("readings_api", __name__)
logger = logging.getLogger("readings_api")

from . import records, views  # noqa: E402

_ = (records, views)

__all__ = ["readings_api"]
