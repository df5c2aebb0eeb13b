"""Tests for event normalization."""

import dataclasses
from datetime import date, datetime, timedelta

import pytest
import pytz

from backend.event_model import Event, InvalidEvent, normalize, normalize_events, parse_instant


AMSTERDAM = pytz.timezone("Europe/Amsterdam")


class TestParseInstant:
    def test_iso_string_with_z_suffix(self):
        result = parse_instant("2024-02-14T08:00:00Z")
        assert result == datetime(2024, 2, 14, 8, 0, tzinfo=pytz.UTC)

    def test_naive_datetime_is_local_time(self):
        result = parse_instant(datetime(2024, 7, 1, 12, 0))
        assert result == AMSTERDAM.localize(datetime(2024, 7, 1, 12, 0))
        assert result.utcoffset() == timedelta(hours=2)

    def test_date_is_local_midnight(self):
        result = parse_instant(date(2024, 1, 5))
        assert result == AMSTERDAM.localize(datetime(2024, 1, 5, 0, 0))

    def test_unix_seconds(self):
        result = parse_instant(1708185600)
        assert result == datetime(2024, 2, 17, 16, 0, tzinfo=pytz.UTC)

    @pytest.mark.parametrize("value", [True, float("nan"), float("inf"), 1e20, "", "next tuesday", object()])
    def test_malformed_values(self, value):
        with pytest.raises(InvalidEvent):
            parse_instant(value)


class TestNormalize:
    def test_event_passes_through(self):
        event = Event(id="a", title="A", start_time=AMSTERDAM.localize(datetime(2024, 1, 1, 9, 0)))
        assert normalize(event) is event

    def test_canonical_record(self):
        event = normalize({
            "id": "a",
            "title": "Breakfast",
            "start_time": "2024-03-01T08:00:00+01:00",
            "end_time": "2024-03-01T09:00:00+01:00",
            "location": "Kitchen",
            "category": "family",
        })
        assert event.id == "a"
        assert event.title == "Breakfast"
        assert event.end_time - event.start_time == timedelta(hours=1)
        assert event.location == "Kitchen"
        assert event.category == "family"
        assert event.is_instance is False

    def test_camel_case_and_legacy_keys(self):
        event = normalize({
            "id": 7,
            "startTime": "2024-03-01T08:00:00Z",
            "type": "sport",
            "parentEventId": "series",
            "isInstance": True,
        })
        assert event.id == "7"
        assert event.category == "sport"
        assert event.parent_event_id == "series"
        assert event.is_instance is True

    def test_timestamp_record(self):
        event = normalize({"id": "ts", "title": "T", "start_ts": 1708185600, "end_ts": 1708192800})
        assert event.start_time == datetime(2024, 2, 17, 16, 0, tzinfo=pytz.UTC)
        assert event.end_time == datetime(2024, 2, 17, 18, 0, tzinfo=pytz.UTC)

    def test_missing_title_defaults(self):
        event = normalize({"id": "x", "start": "2024-03-01T08:00:00Z"})
        assert event.title == "Untitled"

    def test_missing_id(self):
        with pytest.raises(InvalidEvent):
            normalize({"title": "No id", "start_time": "2024-03-01T08:00:00Z"})

    def test_missing_start(self):
        with pytest.raises(InvalidEvent):
            normalize({"id": "x", "title": "No start"})

    def test_end_before_start(self):
        with pytest.raises(InvalidEvent):
            normalize({
                "id": "x",
                "start_time": "2024-03-01T10:00:00Z",
                "end_time": "2024-03-01T09:00:00Z",
            })

    def test_not_a_mapping(self):
        with pytest.raises(InvalidEvent):
            normalize(["id", "start"])

    def test_invalid_event_is_value_error(self):
        assert issubclass(InvalidEvent, ValueError)


class TestEvent:
    def test_frozen(self):
        event = normalize({"id": "x", "start_time": "2024-03-01T08:00:00Z"})
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.title = "Changed"

    def test_requires_aware_start(self):
        with pytest.raises(InvalidEvent):
            Event(id="x", title="Naive", start_time=datetime(2024, 3, 1, 8, 0))

    def test_to_dict(self):
        event = normalize({"id": "x", "title": "X", "start_time": "2024-03-01T08:00:00+00:00"})
        data = event.to_dict()
        assert data["id"] == "x"
        assert data["start_time"] == "2024-03-01T08:00:00+00:00"
        assert data["end_time"] is None


def test_normalize_events_drops_invalid(sample_events):
    raws = sample_events + [{"id": "broken", "start_time": "not a date"}, {"title": "no id"}]
    events = normalize_events(raws)
    assert [e.id for e in events] == ["school-run", "dentist", "football"]
