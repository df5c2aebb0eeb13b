"""
Date binning utilities shared by every calendar skin.

All functions are pure. Days are compared as local calendar dates (see
timezone_utils), never by elapsed-time arithmetic, so daylight-saving
transitions cannot skip or repeat a day.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Iterator, Optional, Union
import re
import sys

from .event_model import Event, InvalidEvent, normalize
from .timezone_utils import to_local_date, local_today


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] BINNING: {msg}", file=sys.stderr)


GRID_WEEKS = 6
GRID_CELLS = GRID_WEEKS * 7

MonthLike = Union[str, date, datetime]

_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-\d{1,2})?\s*$")


# ==================== Months ====================

def start_of_month(d) -> date:
    """First calendar day of the month containing d."""
    return to_local_date(d).replace(day=1)


def end_of_month(d) -> date:
    """Last calendar day of the month containing d."""
    day = to_local_date(d)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def parse_month(value: MonthLike) -> date:
    """
    Parse a month reference into the first day of that month.

    Accepts "YYYY-MM" (a trailing "-DD" is ignored), dates and datetimes.

    Raises:
        ValueError: if a string is not a valid year-month.
    """
    if isinstance(value, (date, datetime)):
        return start_of_month(value)
    match = _MONTH_RE.match(str(value))
    if not match:
        raise ValueError(f"Not a year-month: {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {value!r}")
    return date(year, month, 1)


def format_month(d) -> str:
    """Format the month containing d as "YYYY-MM"."""
    day = to_local_date(d)
    return f"{day.year:04d}-{day.month:02d}"


def shift_month(month: MonthLike, delta: int) -> date:
    """First day of the month delta months away, rolling over years."""
    first = parse_month(month)
    index = first.year * 12 + (first.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


# ==================== Days and weeks ====================

class DayRange:
    """
    Inclusive range of calendar days.

    Lazy and restartable: each iteration starts again from the first day.
    """

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        for offset in range(len(self)):
            yield self.start + timedelta(days=offset)

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def __contains__(self, item) -> bool:
        if not isinstance(item, date):
            return False
        return self.start <= to_local_date(item) <= self.end

    def __repr__(self) -> str:
        return f"DayRange({self.start.isoformat()}, {self.end.isoformat()})"


def enumerate_days(start, end) -> DayRange:
    """Every calendar day from start to end inclusive (empty if end < start)."""
    return DayRange(to_local_date(start), to_local_date(end))


def is_same_calendar_day(a, b) -> bool:
    """Compare local year/month/day only."""
    return to_local_date(a) == to_local_date(b)


def is_today(d, today: Optional[date] = None) -> bool:
    """Whether d falls on today's local date."""
    return to_local_date(d) == (today or local_today())


def start_of_week(d, first_day_of_week: int = 0) -> date:
    """
    First day of the week containing d.

    first_day_of_week uses Python weekday numbers (0=Monday, 6=Sunday).
    """
    day = to_local_date(d)
    return day - timedelta(days=(day.weekday() - first_day_of_week) % 7)


def week_days(d, first_day_of_week: int = 0, count: int = 7) -> list[date]:
    """The count days starting at the beginning of d's week."""
    first = start_of_week(d, first_day_of_week)
    return list(enumerate_days(first, first + timedelta(days=count - 1)))


# ==================== Binning ====================

def _coerce_event(raw: Any) -> Optional[Event]:
    try:
        return normalize(raw)
    except InvalidEvent as e:
        _debug_print(f"Skipping event: {e}")
        return None


def bin_events_by_day(events: Iterable[Any], days: Iterable) -> dict[date, list[Event]]:
    """
    Place events onto the given days by their start time.

    Only the start is used: an event spanning midnight belongs to its start
    day alone. Each requested day is present in the result, with an empty
    list when nothing starts on it. Events are sorted by start time; ties
    keep input order. Duplicate ids are dropped (first occurrence wins) and
    records that fail to normalize are skipped.

    Args:
        events: Event objects or raw records accepted by normalize().
        days: Dates or datetimes; datetimes are reduced to their local day.

    Returns:
        Mapping from date to the ordered list of events starting that day.
    """
    bins: dict[date, list[Event]] = {to_local_date(d): [] for d in days}
    if not bins:
        return bins

    seen: set[str] = set()
    for raw in events:
        event = _coerce_event(raw)
        if event is None or event.id in seen:
            continue
        seen.add(event.id)
        bucket = bins.get(to_local_date(event.start_time))
        if bucket is not None:
            bucket.append(event)

    for bucket in bins.values():
        bucket.sort(key=lambda e: e.start_time)
    return bins


def events_on_day(events: Iterable[Any], day) -> list[Event]:
    """Events starting on a single day, ordered by start time."""
    key = to_local_date(day)
    return bin_events_by_day(events, [key])[key]


# ==================== Month grid ====================

@dataclass(frozen=True)
class GridCell:
    """
    One cell of a 6x7 month grid.

    Padding cells belong to the previous or next month; they keep their
    date so skins can render it dimmed, but never carry events.
    """
    date: date
    events: tuple[Event, ...] = ()
    is_padding: bool = False

    @property
    def is_today(self) -> bool:
        return is_today(self.date)


def build_month_grid(month: MonthLike, first_day_of_week: int = 0,
                     events: Iterable[Any] = ()) -> list[GridCell]:
    """
    Build the 42 cells of a month grid.

    The grid always spans six full weeks, whatever weekday the month starts
    on and however many days it has, so every month renders as a 6x7
    rectangle.

    Args:
        month: "YYYY-MM" string, date or datetime within the month.
        first_day_of_week: 0=Monday ... 6=Sunday.
        events: Events (or raw records) to bin onto the real days.
    """
    first = parse_month(month)
    last = end_of_month(first)
    grid_start = start_of_week(first, first_day_of_week)

    bins = bin_events_by_day(events, enumerate_days(first, last))

    cells = []
    for offset in range(GRID_CELLS):
        day = grid_start + timedelta(days=offset)
        if first <= day <= last:
            cells.append(GridCell(day, tuple(bins[day]), False))
        else:
            cells.append(GridCell(day, (), True))
    return cells
