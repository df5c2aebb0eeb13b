"""Tests for event ingestion from .ics files."""

from datetime import date, datetime
from pathlib import Path

import pytz

from backend.date_binning import bin_events_by_day, enumerate_days
from backend.ics_import import load_ics_file, parse_ics_events
from backend.timezone_utils import to_local_date


FIXTURE = Path(__file__).parent / "fixtures" / "family.ics"
ICS_TEXT = FIXTURE.read_text(encoding="utf-8")

WINDOW_START = datetime(2024, 3, 1, tzinfo=pytz.UTC)
WINDOW_END = datetime(2024, 4, 1, tzinfo=pytz.UTC)


def by_uid(events, uid):
    return [e for e in events if e.id == uid or e.parent_event_id == uid]


def test_single_event():
    events = parse_ics_events(ICS_TEXT, WINDOW_START, WINDOW_END)
    [dentist] = by_uid(events, "dentist-1")
    assert dentist.id == "dentist-1"
    assert dentist.title == "Dentist"
    assert dentist.location == "Main Street 1"
    assert dentist.category == "health"
    assert dentist.is_instance is False
    assert dentist.start_time == datetime(2024, 3, 5, 9, 0, tzinfo=pytz.UTC)


def test_recurring_event_expanded():
    events = parse_ics_events(ICS_TEXT, WINDOW_START, WINDOW_END)
    swims = sorted(by_uid(events, "swim-1"), key=lambda e: e.start_time)
    assert [to_local_date(e.start_time) for e in swims] == [
        date(2024, 3, 4), date(2024, 3, 11), date(2024, 3, 18),
    ]
    assert all(e.is_instance and e.parent_event_id == "swim-1" for e in swims)
    assert len({e.id for e in swims}) == 3
    assert all(e.id.startswith("swim-1@") for e in swims)


def test_window_limits_occurrences():
    events = parse_ics_events(ICS_TEXT, datetime(2024, 3, 10, tzinfo=pytz.UTC), WINDOW_END)
    assert len(by_uid(events, "swim-1")) == 2
    assert by_uid(events, "dentist-1") == []


def test_all_day_event_starts_at_local_midnight():
    events = parse_ics_events(ICS_TEXT, WINDOW_START, WINDOW_END)
    [holiday] = by_uid(events, "holiday-1")
    local_start = holiday.start_time.astimezone(pytz.timezone("Europe/Amsterdam"))
    assert local_start.date() == date(2024, 3, 10)
    assert (local_start.hour, local_start.minute) == (0, 0)


def test_imported_events_bin_without_duplicates():
    events = parse_ics_events(ICS_TEXT, WINDOW_START, WINDOW_END)
    bins = bin_events_by_day(events, enumerate_days(date(2024, 3, 1), date(2024, 3, 31)))
    assert sum(len(v) for v in bins.values()) == 5


def test_load_file():
    assert len(load_ics_file(FIXTURE, WINDOW_START, WINDOW_END)) == 5


def test_load_missing_file(tmp_path):
    assert load_ics_file(tmp_path / "missing.ics", WINDOW_START, WINDOW_END) == []


def test_load_garbage_file(tmp_path):
    path = tmp_path / "garbage.ics"
    path.write_text("this is not a calendar", encoding="utf-8")
    assert load_ics_file(path, WINDOW_START, WINDOW_END) == []
