from __future__ import annotations

import contextlib
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from app.domain.exceptions import ConflictError, RepositoryError
from infrastructure.database.sql_safety import build_set_clause, safe_columns

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = frozenset({"name", "location", "lat", "lng"})


class DeviceOperations:
    """Database operations for the Devices table."""

    def insert_device(self, device: Dict[str, Any]) -> None:
        try:
            with self.connection() as db:
                db.execute(
                    """
                    INSERT INTO Devices (
                        id, name, location, lat, lng, user_id, auth_token, registration_date
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        device["id"],
                        device["name"],
                        device.get("location", ""),
                        device.get("lat", 0.0),
                        device.get("lng", 0.0),
                        device["user_id"],
                        device["auth_token"],
                        device["registration_date"],
                    ),
                )
        except sqlite3.IntegrityError as exc:
            logger.warning("insert_device rejected for %s: %s", device.get("id"), exc)
            raise ConflictError("Device ID or authentication token is already registered") from exc
        except sqlite3.Error as exc:
            logger.error("insert_device failed for %s: %s", device.get("id"), exc)
            raise RepositoryError(str(exc)) from exc

    def get_device(self, device_id: str) -> Optional[Dict[str, Any]]:
        try:
            row = self.get_db().execute("SELECT * FROM Devices WHERE id = ?", (device_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("get_device failed for %s: %s", device_id, exc)
            raise RepositoryError(str(exc)) from exc
        return dict(row) if row else None

    def get_device_by_token(self, auth_token: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        query = "SELECT * FROM Devices WHERE auth_token = ?"
        params: List[Any] = [auth_token]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        query += " ORDER BY registration_date LIMIT 1"
        try:
            row = self.get_db().execute(query, params).fetchone()
        except sqlite3.Error as exc:
            logger.error("get_device_by_token failed: %s", exc)
            raise RepositoryError(str(exc)) from exc
        return dict(row) if row else None

    def list_devices_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            cur = self.get_db().execute(
                "SELECT * FROM Devices WHERE user_id = ? ORDER BY registration_date DESC, id",
                (user_id,),
            )
            return [dict(r) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("list_devices_for_user failed for %s: %s", user_id, exc)
            raise RepositoryError(str(exc)) from exc

    def update_device(self, device_id: str, fields: Dict[str, Any]) -> bool:
        cols = safe_columns(fields, _UPDATABLE_COLUMNS, context="update_device")
        if not cols:
            return False
        assignments, values = build_set_clause(cols)
        try:
            with self.connection() as db:
                cur = db.execute(
                    f"UPDATE Devices SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (*values, device_id),
                )
                return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("update_device failed for %s: %s", device_id, exc)
            raise RepositoryError(str(exc)) from exc

    def delete_device(self, device_id: str) -> bool:
        """Delete the device and the reading stream under its token in one transaction."""
        db = None
        try:
            db = self.get_db()
            readings = db.execute(
                "DELETE FROM SensorReadings WHERE device_token = "
                "(SELECT auth_token FROM Devices WHERE id = ?)",
                (device_id,),
            )
            cur = db.execute("DELETE FROM Devices WHERE id = ?", (device_id,))
            db.commit()
        except sqlite3.Error as exc:
            logger.error("delete_device failed for %s: %s", device_id, exc)
            if db is not None:
                with contextlib.suppress(sqlite3.Error):
                    db.rollback()
            raise RepositoryError(str(exc)) from exc
        logger.info("Deleted device %s with %d readings", device_id, readings.rowcount)
        return cur.rowcount > 0
