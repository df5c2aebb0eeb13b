"""
Event ingestion from local iCalendar (.ics) files.

Recurring events are expanded with recurring_ical_events inside the
requested window, so every occurrence reaches the calendar as its own
Event with is_instance set and parent_event_id pointing at the series.
"""

from datetime import datetime, date, time as dt_time
from pathlib import Path
from typing import Optional
import sys

from icalendar import Calendar as ICalCalendar, Event as ICalEvent
import recurring_ical_events

from .event_model import Event, InvalidEvent
from .timezone_utils import localize


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] ICS: {msg}", file=sys.stderr)


def _to_instant(value) -> datetime:
    """Convert an icalendar date/datetime value to an aware datetime."""
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        # All-day: local midnight
        return localize(datetime.combine(value, dt_time.min))
    raise InvalidEvent(f"Unsupported DTSTART/DTEND value: {value!r}")


def _text(component: ICalEvent, name: str) -> Optional[str]:
    value = component.get(name)
    return str(value) if value else None


def _is_recurring(component: ICalEvent) -> bool:
    return any(component.get(name) is not None for name in ('RRULE', 'RDATE', 'RECURRENCE-ID'))


def _to_event(component: ICalEvent, recurring_uids: set[str]) -> Event:
    uid = _text(component, 'UID')
    if uid is None:
        raise InvalidEvent("VEVENT without UID")

    dtstart = component.get('DTSTART')
    if dtstart is None:
        raise InvalidEvent(f"VEVENT {uid} has no DTSTART")
    start = _to_instant(dtstart.dt)

    dtend = component.get('DTEND')
    end = _to_instant(dtend.dt) if dtend is not None else None
    if end is not None and end < start:
        end = None

    categories = component.get('CATEGORIES')
    category = None
    if categories is not None:
        cats = categories if isinstance(categories, list) else [categories]
        names = [str(c) for cat in cats for c in getattr(cat, 'cats', [cat])]
        category = names[0] if names else None

    is_instance = uid in recurring_uids
    return Event(
        id=f"{uid}@{start.isoformat()}" if is_instance else uid,
        title=_text(component, 'SUMMARY') or "Untitled",
        start_time=start,
        end_time=end,
        location=_text(component, 'LOCATION'),
        description=_text(component, 'DESCRIPTION'),
        color=_text(component, 'COLOR'),
        category=category,
        parent_event_id=uid if is_instance else None,
        is_instance=is_instance,
    )


def parse_ics_events(ical_text: str, start: datetime, end: datetime) -> list[Event]:
    """
    Parse VCALENDAR text into Events occurring between start and end.

    Raises:
        ValueError: if the text is not a parsable calendar.
    """
    calendar = ICalCalendar.from_ical(ical_text)

    recurring_uids = {
        str(component.get('UID'))
        for component in calendar.walk('VEVENT')
        if component.get('UID') is not None and _is_recurring(component)
    }

    events = []
    for component in recurring_ical_events.of(calendar).between(start, end):
        try:
            events.append(_to_event(component, recurring_uids))
        except InvalidEvent as e:
            _debug_print(f"Skipping VEVENT: {e}")
    return events


def load_ics_file(path: Path, start: datetime, end: datetime) -> list[Event]:
    """Load Events from an .ics file; problems are logged and yield no events."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            ical_text = f.read()
        events = parse_ics_events(ical_text, start, end)
    except (OSError, ValueError) as e:
        _debug_print(f"Cannot load {path}: {e}")
        return []
    _debug_print(f"Loaded {len(events)} events from {path}")
    return events
