from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from infrastructure.database.ops.activity_log import ActivityOperations


@dataclass(frozen=True)
class ActivityRepository:
    _backend: ActivityOperations

    def insert(self, activity: dict[str, Any]) -> int:
        return self._backend.insert_activity(activity)

    def recent(
        self,
        user_id: str,
        limit: int = 100,
        since: str | None = None,
        activity_type: str | None = None,
        severities: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        return self._backend.get_recent_activities(
            user_id, limit=limit, since=since, activity_type=activity_type, severities=severities
        )

    def get(self, log_id: int) -> dict[str, Any] | None:
        return self._backend.get_activity(log_id)

    def delete(self, log_id: int) -> bool:
        return self._backend.delete_activity(log_id)
