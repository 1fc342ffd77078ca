from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from app.domain.exceptions import RepositoryError
from infrastructure.database.sql_safety import build_set_clause, safe_columns

logger = logging.getLogger(__name__)

_COLUMNS = "record_key, timestamp_ms, temperature, ph_level, ammonia"
_MEASURED_COLUMNS = frozenset({"temperature", "ph_level", "ammonia"})


class ReadingOperations:
    """Database operations for the SensorReadings table.

    Read failures propagate as RepositoryError so callers can tell
    "no data" apart from "store unavailable".
    """

    def insert_reading(self, device_token: str, reading: Dict[str, Any]) -> None:
        try:
            with self.connection() as db:
                db.execute(
                    f"""
                    INSERT INTO SensorReadings (device_token, {_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        device_token,
                        reading["record_key"],
                        reading["timestamp_ms"],
                        reading["temperature"],
                        reading["ph_level"],
                        reading["ammonia"],
                    ),
                )
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: timestamp beyond SQLite INTEGER
            logger.error("insert_reading failed for %s: %s", device_token, exc)
            raise RepositoryError(str(exc)) from exc

    def get_latest_readings(self, device_token: str, count: int) -> List[Dict[str, Any]]:
        """Newest ``count`` readings, returned oldest first."""
        try:
            cur = self.get_db().execute(
                f"""
                SELECT {_COLUMNS} FROM SensorReadings
                WHERE device_token = ?
                ORDER BY timestamp_ms DESC, record_key DESC
                LIMIT ?
                """,
                (device_token, count),
            )
            rows = [dict(r) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("get_latest_readings failed for %s: %s", device_token, exc)
            raise RepositoryError(str(exc)) from exc
        rows.reverse()
        return rows

    def get_readings_between(self, device_token: str, start_ms: int, end_ms: int) -> List[Dict[str, Any]]:
        """Readings with ``start_ms <= timestamp_ms <= end_ms``, oldest first."""
        try:
            cur = self.get_db().execute(
                f"""
                SELECT {_COLUMNS} FROM SensorReadings
                WHERE device_token = ? AND timestamp_ms >= ? AND timestamp_ms <= ?
                ORDER BY timestamp_ms ASC, record_key ASC
                """,
                (device_token, start_ms, end_ms),
            )
            return [dict(r) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("get_readings_between failed for %s: %s", device_token, exc)
            raise RepositoryError(str(exc)) from exc

    def get_reading(self, device_token: str, record_key: str) -> Optional[Dict[str, Any]]:
        try:
            row = self.get_db().execute(
                f"SELECT {_COLUMNS} FROM SensorReadings WHERE device_token = ? AND record_key = ?",
                (device_token, record_key),
            ).fetchone()
        except sqlite3.Error as exc:
            logger.error("get_reading failed for %s/%s: %s", device_token, record_key, exc)
            raise RepositoryError(str(exc)) from exc
        return dict(row) if row else None

    def update_reading(self, device_token: str, record_key: str, changes: Dict[str, float]) -> bool:
        """Apply a partial update to the measured columns; key and timestamp never change."""
        cols = safe_columns(changes, _MEASURED_COLUMNS, context="update_reading")
        if not cols:
            return False
        assignments, values = build_set_clause(cols)
        try:
            with self.connection() as db:
                cur = db.execute(
                    f"UPDATE SensorReadings SET {assignments} WHERE device_token = ? AND record_key = ?",
                    (*values, device_token, record_key),
                )
                return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("update_reading failed for %s/%s: %s", device_token, record_key, exc)
            raise RepositoryError(str(exc)) from exc

    def delete_reading(self, device_token: str, record_key: str) -> bool:
        try:
            with self.connection() as db:
                cur = db.execute(
                    "DELETE FROM SensorReadings WHERE device_token = ? AND record_key = ?",
                    (device_token, record_key),
                )
                return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("delete_reading failed for %s/%s: %s", device_token, record_key, exc)
            raise RepositoryError(str(exc)) from exc

    def delete_all_readings(self, device_token: str) -> int:
        try:
            with self.connection() as db:
                cur = db.execute("DELETE FROM SensorReadings WHERE device_token = ?", (device_token,))
                return cur.rowcount
        except sqlite3.Error as exc:
            logger.error("delete_all_readings failed for %s: %s", device_token, exc)
            raise RepositoryError(str(exc)) from exc
