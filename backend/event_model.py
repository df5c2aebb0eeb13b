"""
Canonical event record for Family Calendar.

Every skin receives events in this shape (or in a legacy shape derived from
it at the dispatch boundary). Records coming from the host program are
brought into this shape by normalize(); anything that cannot be given a
valid start time is rejected with InvalidEvent.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, date, time as dt_time
from typing import Any, Iterable, Optional
import sys

from .timezone_utils import localize, from_timestamp


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] EVENTS: {msg}", file=sys.stderr)


class InvalidEvent(ValueError):
    """Raised when a raw event record cannot be normalized."""


@dataclass(frozen=True)
class Event:
    """
    Immutable calendar event.

    start_time and end_time are timezone-aware. Recurring events arrive
    already expanded: each occurrence is its own Event with is_instance set
    and parent_event_id pointing at the series.
    """
    id: str
    title: str
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    category: Optional[str] = None
    parent_event_id: Optional[str] = None
    is_instance: bool = False

    def __post_init__(self):
        if self.start_time.tzinfo is None:
            raise InvalidEvent(f"Event {self.id!r}: start_time must be timezone-aware")
        if self.end_time is not None:
            if self.end_time.tzinfo is None:
                raise InvalidEvent(f"Event {self.id!r}: end_time must be timezone-aware")
            if self.end_time < self.start_time:
                raise InvalidEvent(f"Event {self.id!r}: end_time precedes start_time")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "location": self.location,
            "description": self.description,
            "color": self.color,
            "category": self.category,
            "parent_event_id": self.parent_event_id,
            "is_instance": self.is_instance,
        }


# Key aliases accepted in raw records, in lookup order
_START_KEYS = ("start_time", "startTime", "start", "start_ts", "date")
_END_KEYS = ("end_time", "endTime", "end", "end_ts")
_CATEGORY_KEYS = ("category", "type")
_PARENT_KEYS = ("parent_event_id", "parentEventId")
_INSTANCE_KEYS = ("is_instance", "isInstance")


def _first(raw: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def parse_instant(value: Any) -> datetime:
    """
    Parse a start/end value into an aware datetime.

    Accepts datetimes (naive = local), dates (local midnight), Unix
    timestamps in seconds and ISO-8601 strings.

    Raises:
        InvalidEvent: if the value cannot be interpreted.
    """
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        return localize(datetime.combine(value, dt_time.min))
    if isinstance(value, bool):
        raise InvalidEvent(f"Not a valid time: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return from_timestamp(value)
        except ValueError as e:
            raise InvalidEvent(str(e)) from e
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidEvent("Empty time string")
        try:
            return localize(datetime.fromisoformat(text))
        except ValueError as e:
            raise InvalidEvent(f"Malformed time string: {value!r}") from e
    raise InvalidEvent(f"Unsupported time value: {value!r}")


def normalize(raw: Any) -> Event:
    """
    Bring a raw event record into the canonical Event shape.

    Args:
        raw: An Event (returned unchanged) or a mapping using either the
            canonical field names, the camelCase names, or the legacy
            start_ts/end_ts/type record format.

    Raises:
        InvalidEvent: if the id or start time is missing or malformed, or
            the end time precedes the start time.
    """
    if isinstance(raw, Event):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidEvent(f"Unsupported event record: {type(raw).__name__}")

    event_id = _optional_str(raw.get("id"))
    if event_id is None:
        raise InvalidEvent("Event record has no id")

    start_value = _first(raw, _START_KEYS)
    if start_value is None:
        raise InvalidEvent(f"Event {event_id!r} has no start time")
    start_time = parse_instant(start_value)

    end_value = _first(raw, _END_KEYS)
    end_time = parse_instant(end_value) if end_value is not None else None

    return Event(
        id=event_id,
        title=_optional_str(raw.get("title")) or "Untitled",
        start_time=start_time,
        end_time=end_time,
        location=_optional_str(raw.get("location")),
        description=_optional_str(raw.get("description")),
        color=_optional_str(raw.get("color")),
        category=_optional_str(_first(raw, _CATEGORY_KEYS)),
        parent_event_id=_optional_str(_first(raw, _PARENT_KEYS)),
        is_instance=bool(_first(raw, _INSTANCE_KEYS) or False),
    )


def normalize_events(raws: Iterable[Any]) -> list[Event]:
    """Normalize a collection of records, dropping (and logging) invalid ones."""
    events = []
    for raw in raws:
        try:
            events.append(normalize(raw))
        except InvalidEvent as e:
            _debug_print(f"Dropping invalid event: {e}")
    return events
