"""
Props handed to calendar skins.

Most skins are written against CalendarViewProps. Two groups of older
skins expect different shapes: the AR view works on records with Unix
timestamps, and the data-visualization/themed skins work on records with
a pre-converted local date and their own callback names. The dispatch
shell builds CalendarViewProps once and converts it through ADAPTERS
according to the skin's declared DataShape.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from backend.event_model import Event
from backend.styles import DataShape
from backend.timezone_utils import to_local_datetime, to_timestamp


DatePressHandler = Callable[[date], None]
EventPressHandler = Callable[[Any], None]
MonthChangeHandler = Callable[[str], None]


@dataclass(frozen=True)
class CalendarViewProps:
    """The common props every host supplies."""
    events: tuple[Event, ...]
    selected_date: date
    current_month: str  # "YYYY-MM"
    on_date_press: DatePressHandler
    on_event_press: EventPressHandler
    on_month_change: Optional[MonthChangeHandler] = None


@dataclass(frozen=True)
class TimestampViewProps:
    """Props for skins reading start_ts/end_ts Unix seconds."""
    events: tuple[dict, ...]
    selected_date: date
    current_month: str
    on_date_press: DatePressHandler
    on_event_press: EventPressHandler
    on_month_change: Optional[MonthChangeHandler] = None


@dataclass(frozen=True)
class DatedViewProps:
    """Props for skins reading a pre-converted "date" per record."""
    events: tuple[dict, ...]
    current_date: date
    selected_date: date
    current_month: str
    on_date_select: DatePressHandler
    on_event_press: EventPressHandler
    on_month_change: Optional[MonthChangeHandler] = None


def to_timestamp_record(event: Event) -> dict:
    start_ts = to_timestamp(event.start_time)
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "start_ts": start_ts,
        "end_ts": to_timestamp(event.end_time) if event.end_time else start_ts,
        "location": event.location,
        "color": event.color,
        "type": event.category,
        "parent_event_id": event.parent_event_id,
        "is_instance": event.is_instance,
    }


def to_dated_record(event: Event) -> dict:
    local_start: datetime = to_local_datetime(event.start_time)
    return {
        "id": event.id,
        "title": event.title,
        "date": local_start,
        "category": event.category,
        "color": event.color,
        "location": event.location,
        "description": event.description,
    }


def _common(props: CalendarViewProps) -> CalendarViewProps:
    return props


def _timestamp(props: CalendarViewProps) -> TimestampViewProps:
    return TimestampViewProps(
        events=tuple(to_timestamp_record(e) for e in props.events),
        selected_date=props.selected_date,
        current_month=props.current_month,
        on_date_press=props.on_date_press,
        on_event_press=props.on_event_press,
        on_month_change=props.on_month_change,
    )


def _dated(props: CalendarViewProps) -> DatedViewProps:
    return DatedViewProps(
        events=tuple(to_dated_record(e) for e in props.events),
        current_date=props.selected_date,
        selected_date=props.selected_date,
        current_month=props.current_month,
        on_date_select=props.on_date_press,
        on_event_press=props.on_event_press,
        on_month_change=props.on_month_change,
    )


ADAPTERS: dict[DataShape, Callable[[CalendarViewProps], Any]] = {
    DataShape.COMMON: _common,
    DataShape.TIMESTAMP: _timestamp,
    DataShape.DATED: _dated,
}


def adapt_props(shape: DataShape, props: CalendarViewProps):
    """Convert the common props into the shape a skin declares."""
    return ADAPTERS[shape](props)
