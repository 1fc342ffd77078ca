from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from app.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)


class ActivityOperations:
    """Database operations for the ActivityLogs table."""

    def insert_activity(self, activity: Dict[str, Any]) -> int:
        try:
            with self.connection() as db:
                cur = db.execute(
                    """
                    INSERT INTO ActivityLogs (
                        user_id, device_id, device_name, type, message, severity, timestamp
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        activity["user_id"],
                        activity.get("device_id") or "",
                        activity.get("device_name") or "",
                        activity["type"],
                        activity["message"],
                        activity["severity"],
                        activity["timestamp"],
                    ),
                )
                return int(cur.lastrowid)
        except sqlite3.Error as exc:
            logger.error("insert_activity failed: %s", exc)
            raise RepositoryError(str(exc)) from exc

    def get_recent_activities(
        self,
        user_id: str,
        limit: int = 100,
        since: Optional[str] = None,
        activity_type: Optional[str] = None,
        severities: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Newest first. ``since`` is an inclusive ISO-8601 UTC lower bound."""
        query = "SELECT * FROM ActivityLogs WHERE user_id = ?"
        params: List[Any] = [user_id]
        if since:
            query += " AND timestamp >= ?"
            params.append(since)
        if activity_type:
            query += " AND type = ?"
            params.append(activity_type)
        if severities:
            query += f" AND severity IN ({', '.join('?' for _ in severities)})"
            params.extend(severities)
        query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(limit)
        try:
            cur = self.get_db().execute(query, params)
            return [dict(r) for r in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("get_recent_activities failed for %s: %s", user_id, exc)
            raise RepositoryError(str(exc)) from exc

    def get_activity(self, log_id: int) -> Optional[Dict[str, Any]]:
        try:
            row = self.get_db().execute("SELECT * FROM ActivityLogs WHERE id = ?", (log_id,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("get_activity failed for %s: %s", log_id, exc)
            raise RepositoryError(str(exc)) from exc
        return dict(row) if row else None

    def delete_activity(self, log_id: int) -> bool:
        try:
            with self.connection() as db:
                cur = db.execute("DELETE FROM ActivityLogs WHERE id = ?", (log_id,))
                return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("delete_activity failed for %s: %s", log_id, exc)
            raise RepositoryError(str(exc)) from exc
