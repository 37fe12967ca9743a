"""
Calendar feature: expansion of a recurring event into concrete rows.

Pure functions only; persistence lives in ``CalendarService``.
"""

import calendar
import uuid
from datetime import datetime, timedelta, timezone

from eido.core.exceptions import ValidationError
from eido.features.calendar.schemas import EventCreate, RepeatPattern

# Occurrences are generated up to this far past the current wall-clock time.
# A recurring series may not start more than this far before it either.
RECURRENCE_HORIZON = timedelta(days=365)


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month.

    Jan 31 + 1 month = Feb 28 (or 29).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_occurrence(current: datetime, pattern: RepeatPattern | None, horizon: datetime) -> datetime:
    """Advance one step of the cadence.

    An unrecognized pattern jumps past the horizon so expansion stops after
    the first occurrence.
    """
    if pattern == RepeatPattern.DAILY:
        return current + timedelta(days=1)
    if pattern == RepeatPattern.WEEKLY:
        return current + timedelta(weeks=1)
    if pattern == RepeatPattern.MONTHLY:
        return add_months(current, 1)
    return horizon + timedelta(days=1)


def _row(data: EventCreate, user_id: str, start: datetime, end: datetime | None, series_id: str | None) -> dict:
    return {
        "user_id": user_id,
        "class_id": data.class_id,
        "title": data.title,
        "event_start": start.isoformat(),
        "event_end": end.isoformat() if end is not None else None,
        "location": data.location,
        "notes": data.notes,
        "event_type": data.event_type,
        "repeat_pattern": data.repeat_pattern,
        "series_id": series_id,
    }


def materialize_occurrences(
    data: EventCreate,
    user_id: str,
    now: datetime | None = None,
    series_id: str | None = None,
) -> list[dict]:
    """Expand a create request into the rows to insert.

    Args:
        data: The validated create request.
        user_id: Owner taken from the authenticated session.
        now: Wall-clock reference for the horizon (defaults to current UTC time).
        series_id: Key shared by every row of a recurring batch. Generated
            when omitted.

    Returns:
        One row for a non-recurring event, otherwise one row per occurrence
        from ``event_start`` up to and including ``now + 365 days``.

    Raises:
        ValidationError: a recurring event starts more than 365 days ago.
    """
    pattern = RepeatPattern.parse(data.repeat_pattern)
    if pattern == RepeatPattern.NONE:
        return [_row(data, user_id, data.event_start, data.event_end, None)]

    now = now or datetime.now(timezone.utc)
    horizon = now + RECURRENCE_HORIZON
    if data.event_start < now - RECURRENCE_HORIZON:
        raise ValidationError(
            "Recurring events must not start more than 365 days in the past",
            detail=f"event_start={data.event_start.isoformat()}",
        )
    duration = data.event_end - data.event_start if data.event_end is not None else timedelta(0)
    series_id = series_id or str(uuid.uuid4())

    rows = []
    current = data.event_start
    while current <= horizon:
        end = current + duration if duration else None
        rows.append(_row(data, user_id, current, end, series_id))
        current = next_occurrence(current, pattern, horizon)
    return rows
