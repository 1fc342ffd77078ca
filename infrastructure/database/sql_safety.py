"""
SQL Safety Utilities
====================

Helpers that keep dict keys from reaching a ``SET ...`` fragment unless they
are allowlisted column names.

Usage::

    from infrastructure.database.sql_safety import build_set_clause, safe_columns

    cols = safe_columns(fields, {"name", "location"}, context="update_device")
    set_clause, values = build_set_clause(cols)
    db.execute(f"UPDATE Devices SET {set_clause} WHERE id = ?", [*values, device_id])
"""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# Column names must be simple identifiers: letters, digits, underscores.
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def safe_columns(
    data: dict[str, Any],
    allowed: frozenset[str] | set[str],
    *,
    context: str = "",
    drop_none: bool = False,
) -> dict[str, Any]:
    """Return *data* filtered to keys present in *allowed*.

    Parameters
    ----------
    data:
        Incoming field mapping from the service layer.
    allowed:
        Set of column names that may be interpolated into SQL.
    context:
        Optional label for log messages (e.g. ``"update_reading"``).
    drop_none:
        If ``True``, also drop keys whose value is ``None``.
    """
    filtered: dict[str, Any] = {}
    rejected: list[str] = []

    for key, value in data.items():
        if key not in allowed or not _IDENT_RE.match(key):
            rejected.append(key)
            continue
        if drop_none and value is None:
            continue
        filtered[key] = value

    if rejected:
        logger.warning("safe_columns(%s): dropped non-allowed keys: %s", context or "?", rejected)

    return filtered


def build_set_clause(cols: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build a ``SET col1 = ?, col2 = ?`` fragment from *cols*.

    >>> build_set_clause({"ph_level": 7.1, "ammonia": 0.2})
    ('ph_level = ?, ammonia = ?', [7.1, 0.2])
    """
    clause = ", ".join(f"{k} = ?" for k in cols)
    return clause, list(cols.values())
