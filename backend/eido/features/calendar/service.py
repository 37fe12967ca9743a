"""
Calendar feature: Service layer for calendar event management.
"""

import logging
from datetime import datetime, timedelta, timezone
from supabase import Client

from eido.core.exceptions import NotFoundError, UpstreamError, ValidationError
from eido.features.calendar.recurrence import materialize_occurrences
from eido.features.calendar.schemas import CLEARABLE_FIELDS, DeletionScope, EventCreate, EventRef, as_utc

logger = logging.getLogger(__name__)

TABLE = "calendar_events"


class CalendarService:
    """Recurring event creation, scoped deletion and plain CRUD.

    Every query carries ``user_id = <caller>`` so rows of other owners are
    never read or written, whatever ids the caller passes.
    """

    def __init__(self, db: Client):
        self.db = db

    def _execute(self, query, operation: str):
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"calendar_events {operation} failed: {e}")
            raise UpstreamError(operation, str(e)) from e

    def create_event(self, user_id: str, data: EventCreate, now: datetime | None = None) -> list[dict]:
        """Insert one event, or the whole series for a recurring one, in a single batch."""
        rows = materialize_occurrences(data, user_id, now=now)
        if not rows:
            return []

        result = self._execute(self.db.table(TABLE).insert(rows), "insert")
        logger.info(
            f"Created {len(result.data)} event(s) '{data.title}' "
            f"(repeat={data.repeat_pattern or 'none'}) for user {user_id}"
        )
        return result.data

    def get_events(
        self,
        user_id: str,
        start: datetime | None = None,
        days_ahead: int | None = None,
        class_id: str | None = None,
        event_type: str | None = None,
    ) -> list[dict]:
        """Get events for a user, optionally within ``[start, start + days_ahead]``.

        Args:
            user_id: User's UUID
            start: Window start; without it every event is returned unless
                days_ahead is given, which then counts from now
            days_ahead: Window length in days
            class_id: Filter by class
            event_type: Filter by event type
        """
        query = self.db.table(TABLE).select("*").eq("user_id", user_id)

        if start is None and days_ahead is not None:
            start = datetime.now(timezone.utc)
        if start is not None:
            start = as_utc(start)
            query = query.gte("event_start", start.isoformat())
            if days_ahead is not None:
                query = query.lte("event_start", (start + timedelta(days=days_ahead)).isoformat())
        if class_id:
            query = query.eq("class_id", class_id)
        if event_type:
            query = query.eq("event_type", event_type)

        result = self._execute(query.order("event_start", desc=False), "select")
        return result.data

    def get_event_by_id(self, user_id: str, event_id: str) -> dict:
        """Get a single event by ID."""
        result = self._execute(
            self.db.table(TABLE).select("*").eq("id", event_id).eq("user_id", user_id),
            "select",
        )
        if not result.data:
            raise NotFoundError(f"Event '{event_id}' not found")
        return result.data[0]

    def update_event(self, user_id: str, event_id: str, update_data: dict) -> dict:
        """Update an existing event (rename, reschedule...).

        ``None`` clears a nullable column and is dropped for the others.
        """
        clean_data = {
            k: v for k, v in update_data.items() if v is not None or k in CLEARABLE_FIELDS
        }
        if not clean_data:
            raise ValidationError("Nothing to update")

        current = self.get_event_by_id(user_id, event_id)

        for key in ("event_start", "event_end"):
            if isinstance(clean_data.get(key), datetime):
                clean_data[key] = as_utc(clean_data[key]).isoformat()

        start = clean_data.get("event_start", current["event_start"])
        end = clean_data.get("event_end", current.get("event_end"))
        if end is not None and _parse(end) < _parse(start):
            raise ValidationError(
                "event_end must not be before event_start",
                detail=f"start={start}, end={end}",
            )

        result = self._execute(
            self.db.table(TABLE).update(clean_data).eq("id", event_id).eq("user_id", user_id),
            "update",
        )
        if not result.data:
            raise NotFoundError(f"Event '{event_id}' not found")
        return result.data[0]

    def delete_event(self, user_id: str, event: EventRef, scope: DeletionScope | str) -> int:
        """Delete one occurrence, it and the later ones of its series, or the whole series.

        Rows of the same series are matched by ``series_id`` when the event
        has one, otherwise by equal title.

        Returns:
            Number of rows removed. Zero is not an error.
        """
        try:
            scope = DeletionScope(scope)
        except ValueError:
            raise ValidationError(
                "Invalid deletion scope",
                detail=f"Expected one of: {', '.join(s.value for s in DeletionScope)}",
            )

        query = self.db.table(TABLE).delete().eq("user_id", user_id)

        if scope == DeletionScope.THIS:
            query = query.eq("id", event.id)
        else:
            if event.series_id:
                query = query.eq("series_id", event.series_id)
            else:
                query = query.eq("title", event.title)
            if scope == DeletionScope.FOLLOWING:
                query = query.gte("event_start", as_utc(event.event_start).isoformat())

        result = self._execute(query, "delete")
        deleted = len(result.data or [])
        logger.info(f"Deleted {deleted} event(s) (scope={scope.value}, anchor={event.id}) for user {user_id}")
        return deleted


def _parse(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(value))
