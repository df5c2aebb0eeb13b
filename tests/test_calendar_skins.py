"""Tests for the calendar skins."""

from datetime import date

import pytest
from PySide6.QtCore import Qt
from PySide6.QtTest import QTest

from backend.event_model import normalize_events
from gui.widgets.calendar_skins import (
    LONG_PRESS_MS, AgendaSkin, DayFocusSkin, MonthGridSkin, CompactMonthSkin, ThreeDaySkin,
    TimelineSkin, WeekGridSkin, YearOverviewSkin, set_first_day_of_week
)
from gui.widgets.view_props import CalendarViewProps


@pytest.fixture
def presses():
    return {"dates": [], "events": [], "months": []}


@pytest.fixture
def make_props(sample_events, presses):
    def factory(selected=date(2024, 2, 14), month="2024-02", events=None):
        return CalendarViewProps(
            events=tuple(normalize_events(sample_events if events is None else events)),
            selected_date=selected,
            current_month=month,
            on_date_press=presses["dates"].append,
            on_event_press=presses["events"].append,
            on_month_change=presses["months"].append,
        )
    return factory


class TestMonthGridSkin:
    def test_grid_built_from_props(self, qapp, make_props):
        skin = MonthGridSkin()
        skin.set_props(make_props())
        assert len(skin.grid) == 42
        cell = next(c for c in skin.grid if c.date == date(2024, 2, 14))
        assert [e.id for e in cell.events] == ["dentist", "school-run"]

    def test_first_day_of_week(self, qapp, make_props):
        set_first_day_of_week(6)
        skin = MonthGridSkin()
        skin.set_props(make_props())
        assert skin.grid[0].date == date(2024, 1, 28)

    def test_navigation(self, qapp, make_props, presses):
        skin = MonthGridSkin()
        skin.set_props(make_props(month="2024-12"))
        skin.change_month(date(2025, 1, 1))
        skin.press_date(date(2024, 12, 24))
        assert presses["months"] == ["2025-01"]
        assert presses["dates"] == [date(2024, 12, 24)]

    def test_compact_variant_shares_grid(self, qapp, make_props):
        skin = CompactMonthSkin()
        skin.set_props(make_props())
        assert len(skin.grid) == 42


class TestDayColumns:
    def test_week_starts_on_configured_day(self, qapp, make_props):
        skin = WeekGridSkin()
        skin.set_props(make_props(selected=date(2024, 2, 14)))
        assert skin.visible_days()[0] == date(2024, 2, 12)
        assert list(skin.bins) == skin.visible_days()
        assert [e.id for e in skin.bins[date(2024, 2, 17)]] == ["football"]
        assert skin.bins[date(2024, 2, 13)] == []

    def test_three_days_from_selection(self, qapp, make_props):
        skin = ThreeDaySkin()
        skin.set_props(make_props(selected=date(2024, 2, 28)))
        assert skin.visible_days() == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


class TestSingleDay:
    def test_day_focus_lists_selected_day(self, qapp, make_props):
        skin = DayFocusSkin()
        skin.set_props(make_props(selected=date(2024, 2, 14)))
        assert [e.id for e in skin.day_events] == ["dentist", "school-run"]

    def test_empty_day(self, qapp, make_props):
        skin = TimelineSkin()
        skin.set_props(make_props(selected=date(2024, 2, 15)))
        assert skin.day_events == []


def test_agenda_covers_month(qapp, make_props):
    skin = AgendaSkin()
    skin.set_props(make_props(month="2024-02"))
    assert len(skin.bins) == 29
    busy = [day for day, events in skin.bins.items() if events]
    assert busy == [date(2024, 2, 14), date(2024, 2, 17)]


def test_year_overview_counts(qapp, make_props, presses):
    skin = YearOverviewSkin()
    skin.set_props(make_props(month="2024-05"))
    assert skin.counts[2] == 3
    assert sum(skin.counts.values()) == 3

    skin._open_month(7)
    assert presses["months"] == ["2024-07"]
    assert presses["dates"] == [date(2024, 7, 1)]


def test_long_press_signal(qapp, make_props):
    skin = MonthGridSkin()
    skin.set_props(make_props())
    fired = []
    skin.long_pressed.connect(lambda: fired.append(True))

    QTest.mousePress(skin, Qt.LeftButton)
    QTest.qWait(LONG_PRESS_MS + 300)
    QTest.mouseRelease(skin, Qt.LeftButton)
    assert fired == [True]


def test_short_press_is_not_long(qapp, make_props):
    skin = MonthGridSkin()
    skin.set_props(make_props())
    fired = []
    skin.long_pressed.connect(lambda: fired.append(True))

    QTest.mousePress(skin, Qt.LeftButton)
    QTest.mouseRelease(skin, Qt.LeftButton)
    QTest.qWait(LONG_PRESS_MS + 300)
    assert fired == []
