"""Activity log service: per-user event history for devices.

Listing operations degrade to an empty list when the store fails so that
dashboards keep rendering; mutations propagate the failure.
"""

from __future__ import annotations

import logging
from datetime import timezone

from app.constants import Pagination
from app.domain.exceptions import AccessDeniedError, NotFoundError, RepositoryError, ValidationError
from app.domain.log_event import LogEvent, LogFilters
from app.enums import DateRangeFilter, LogSeverity, LogType
from app.utils.time import days_ago, start_of_display_day, utc_now
from infrastructure.database.repositories.activity_log import ActivityRepository

logger = logging.getLogger(__name__)

# Upper bound on rows scanned by a filtered listing; the search filter runs after the query.
_FILTERED_SCAN_LIMIT = 10_000


def _iso(dt) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


class ActivityLogService:
    """Append, list and delete log events owned by a user."""

    def __init__(
        self,
        repo: ActivityRepository,
        *,
        default_limit: int = Pagination.LOGS_DEFAULT_LIMIT,
        alerts_limit: int = Pagination.RECENT_ALERTS_LIMIT,
    ):
        self._repo = repo
        self.default_limit = default_limit
        self.alerts_limit = alerts_limit

    def add_log_event(
        self,
        user_id: str,
        device_id: str,
        type: LogType | str,
        message: str,
        severity: LogSeverity | str,
        device_name: str = "",
    ) -> LogEvent:
        """Append one event stamped with the current UTC time.

        Raises:
            ValidationError: unknown type/severity or missing user
            RepositoryError: store failure
        """
        if not user_id:
            raise ValidationError("user_id is required")
        try:
            log_type = LogType(type)
            log_severity = LogSeverity(severity)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        timestamp = _iso(utc_now())
        log_id = self._repo.insert(
            {
                "user_id": user_id,
                "device_id": device_id,
                "device_name": device_name,
                "type": log_type.value,
                "message": message,
                "severity": log_severity.value,
                "timestamp": timestamp,
            }
        )
        logger.debug("Log event %s recorded for user %s: %s", log_id, user_id, message)
        return LogEvent(
            id=log_id,
            type=log_type,
            message=message,
            severity=log_severity,
            timestamp=timestamp,
            device_id=device_id or "",
            device=device_name or "",
            user_id=user_id,
        )

    def fetch_logs(self, user_id: str, limit: int | None = None) -> list[LogEvent]:
        """Most recent events for a user, newest first."""
        try:
            rows = self._repo.recent(user_id, limit=limit or self.default_limit)
        except RepositoryError as exc:
            logger.error("Error fetching logs for %s: %s", user_id, exc)
            return []
        return [LogEvent.from_row(r) for r in rows]

    def fetch_filtered_logs(self, user_id: str, filters: LogFilters) -> list[LogEvent]:
        """Type, severity and date bucket are applied in the query; the search term after.

        At most the newest 10,000 matching events are scanned. Hitting that cap is
        logged as a warning so a truncated result is visible in the logs.
        """
        since = self._date_lower_bound(filters.date_range)
        try:
            rows = self._repo.recent(
                user_id,
                limit=_FILTERED_SCAN_LIMIT,
                since=since,
                activity_type=LogType(filters.type).value if filters.type else None,
                severities=[LogSeverity(filters.severity).value] if filters.severity else None,
            )
        except RepositoryError as exc:
            logger.error("Error fetching filtered logs for %s: %s", user_id, exc)
            return []

        if len(rows) >= _FILTERED_SCAN_LIMIT:
            logger.warning(
                "Filtered log listing for %s reached the %d row scan limit; older events are omitted",
                user_id,
                _FILTERED_SCAN_LIMIT,
            )
        events = [LogEvent.from_row(r) for r in rows]
        if filters.search_term:
            events = [e for e in events if e.matches(filters.search_term)]
        return events

    def fetch_recent_alerts(self, user_id: str, limit: int | None = None) -> list[LogEvent]:
        """High and medium severity events, newest first."""
        try:
            rows = self._repo.recent(
                user_id,
                limit=limit or self.alerts_limit,
                severities=[LogSeverity.HIGH.value, LogSeverity.MEDIUM.value],
            )
        except RepositoryError as exc:
            logger.error("Error fetching recent alerts for %s: %s", user_id, exc)
            return []
        return [LogEvent.from_row(r) for r in rows]

    def delete_log_event(self, user_id: str, log_id: int) -> None:
        """
        Raises:
            NotFoundError: no event with this id
            AccessDeniedError: event belongs to another user
        """
        row = self._repo.get(log_id)
        if row is None:
            raise NotFoundError(f"Log event {log_id} not found")
        if str(row["user_id"]) != str(user_id):
            raise AccessDeniedError("Cannot delete another user's log event")
        self._repo.delete(log_id)
        logger.info("Log event %s deleted by %s", log_id, user_id)

    @staticmethod
    def _date_lower_bound(date_range: DateRangeFilter | str | None) -> str | None:
        if date_range == DateRangeFilter.TODAY:
            return _iso(start_of_display_day())
        if date_range == DateRangeFilter.WEEK:
            return _iso(days_ago(7))
        if date_range == DateRangeFilter.MONTH:
            return _iso(days_ago(30))
        return None
