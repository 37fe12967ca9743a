"""
Calendar feature: Schemas for request/response models.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, field_validator, model_validator


class RepeatPattern(str, Enum):
    """Recurrence cadence of a series. Stored as plain text on each row."""
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str | None) -> "RepeatPattern | None":
        """Return the matching pattern, or None for an unrecognized string."""
        if value is None or value == "":
            return cls.NONE
        try:
            return cls(value)
        except ValueError:
            return None


class DeletionScope(str, Enum):
    """How much of a series a delete request removes."""
    THIS = "this"
    FOLLOWING = "following"
    ALL = "all"


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventCreate(BaseModel):
    """Request to create a calendar event, optionally recurring."""
    title: str
    event_start: datetime
    event_end: datetime | None = None
    class_id: str | None = None
    location: str | None = None
    notes: str | None = None
    event_type: str | None = None  # lecture | exam | assignment | study | other
    repeat_pattern: str | None = None  # none | daily | weekly | monthly

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("event_start", "event_end")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.event_end is not None and self.event_end < self.event_start:
            raise ValueError("event_end must not be before event_start")
        return self


# Event columns an update may set back to null.
CLEARABLE_FIELDS = frozenset({"event_end", "class_id", "location", "notes", "event_type"})


class EventUpdate(BaseModel):
    """Request to update an existing event.

    Omitted fields keep their value. An explicit null clears the nullable
    fields (see ``CLEARABLE_FIELDS``); null title or start is ignored.
    """
    title: str | None = None
    event_start: datetime | None = None
    event_end: datetime | None = None
    class_id: str | None = None
    location: str | None = None
    notes: str | None = None
    event_type: str | None = None

    @field_validator("event_start", "event_end")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class EventRef(BaseModel):
    """The concrete occurrence a delete request is anchored on."""
    id: str
    title: str
    event_start: datetime
    series_id: str | None = None

    @field_validator("event_start")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)


class EventDeleteRequest(BaseModel):
    """Request to delete one occurrence, the rest of its series, or all of it."""
    event: EventRef
    scope: DeletionScope = DeletionScope.THIS
