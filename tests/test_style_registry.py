"""Tests for the style catalogue and registry."""

import pytest

from backend.styles import CalendarStyle, DataShape, DEFAULT_STYLE, coerce_style, is_valid_style
from gui.widgets.calendar_skins import (
    MonthGridSkin, WeekGridSkin, TimelineSkin, DatedMonthGridSkin, TimestampMonthGridSkin, SkinView
)
from gui.widgets.style_registry import (
    CATEGORY_ORDER, STYLE_REGISTRY, descriptors_by_category, get_descriptor,
    list_descriptors, resolve_strategy
)


def test_catalogue_has_forty_styles():
    assert len(CalendarStyle) == 40
    assert DEFAULT_STYLE is CalendarStyle.GRID_MONTH


def test_every_style_registered():
    assert set(STYLE_REGISTRY) == set(CalendarStyle)
    for style, descriptor in STYLE_REGISTRY.items():
        assert descriptor.style is style
        assert descriptor.name
        assert descriptor.category in CATEGORY_ORDER
        assert issubclass(descriptor.strategy, SkinView)


@pytest.mark.parametrize("value,expected", [
    ("grid-month", True),
    ("ryokan-style", True),
    (CalendarStyle.AR_VIEW, True),
    ("Grid-Month", False),
    ("", False),
    ("unknown-style", False),
    (None, False),
    (42, False),
])
def test_is_valid_style(value, expected):
    assert is_valid_style(value) is expected


def test_coerce_style():
    assert coerce_style("timeline") is CalendarStyle.TIMELINE
    assert coerce_style("nonsense") is CalendarStyle.GRID_MONTH
    assert coerce_style(None) is CalendarStyle.GRID_MONTH


class TestResolveStrategy:
    def test_known_styles(self):
        assert resolve_strategy("grid-month") is MonthGridSkin
        assert resolve_strategy("weekly-grid") is WeekGridSkin
        assert resolve_strategy(CalendarStyle.TIMELINE) is TimelineSkin

    @pytest.mark.parametrize("value", ["nonsense", "", None, 3.5, "GRID-MONTH"])
    def test_unknown_falls_back_to_month_grid(self, value):
        assert resolve_strategy(value) is MonthGridSkin

    def test_data_shapes(self):
        assert resolve_strategy("grid-month").data_shape is DataShape.COMMON
        assert resolve_strategy("ar-view") is TimestampMonthGridSkin
        assert resolve_strategy("ar-view").data_shape is DataShape.TIMESTAMP
        for style in ("bubble-chart", "seasonal-landscape", "bookshelf", "music-staff",
                      "kitchen-recipe", "running-track", "mood-diary", "fitness-challenge",
                      "cube-3d", "ai-prediction"):
            assert resolve_strategy(style) is DatedMonthGridSkin
            assert resolve_strategy(style).data_shape is DataShape.DATED


def test_get_descriptor_falls_back():
    assert get_descriptor("bento-box").name == "Bento Box"
    assert get_descriptor("missing").style is CalendarStyle.GRID_MONTH


def test_list_descriptors_in_catalogue_order():
    assert [d.style for d in list_descriptors()] == list(CalendarStyle)


def test_descriptors_by_category():
    groups = descriptors_by_category()
    assert list(groups) == list(CATEGORY_ORDER)
    assert [d.style for d in groups["Recommended"]] == [
        CalendarStyle.GRID_MONTH, CalendarStyle.WEEKLY_GRID, CalendarStyle.TIMELINE,
    ]
    assert sum(len(v) for v in groups.values()) == 40
