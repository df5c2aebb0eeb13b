"""
Style registry: every CalendarStyle mapped to a display name, a picker
category and the skin class that renders it.

Many styles share a layout family; the registry is the only place that
decides which family a style uses.
"""

from dataclasses import dataclass
from typing import Optional

from backend.styles import CalendarStyle, DEFAULT_STYLE, is_valid_style, coerce_style
from .calendar_skins import (
    SkinView, MonthGridSkin, CompactMonthSkin, WeekGridSkin, ThreeDaySkin,
    DayFocusSkin, TimelineSkin, AgendaSkin, YearOverviewSkin,
    DatedMonthGridSkin, TimestampMonthGridSkin
)

__all__ = [
    'StyleDescriptor', 'STYLE_REGISTRY', 'CATEGORY_ORDER',
    'resolve_strategy', 'get_descriptor', 'list_descriptors',
    'descriptors_by_category', 'is_valid_style',
]


@dataclass(frozen=True)
class StyleDescriptor:
    style: CalendarStyle
    name: str
    category: str
    strategy: type[SkinView]


CATEGORY_ORDER = (
    "Recommended", "Basic", "Family", "Visual", "Interactive",
    "Data visualization", "Themed", "Health", "Future tech", "Japanese family",
)


def _d(style: CalendarStyle, name: str, category: str, strategy: type[SkinView]) -> StyleDescriptor:
    return StyleDescriptor(style=style, name=name, category=category, strategy=strategy)


S = CalendarStyle

STYLE_REGISTRY: dict[CalendarStyle, StyleDescriptor] = {d.style: d for d in (
    # Recommended
    _d(S.GRID_MONTH, "Month Grid", "Recommended", MonthGridSkin),
    _d(S.WEEKLY_GRID, "Weekly Grid", "Recommended", WeekGridSkin),
    _d(S.TIMELINE, "Timeline", "Recommended", TimelineSkin),

    # Basic
    _d(S.DAY_FOCUS, "Day Focus", "Basic", DayFocusSkin),
    _d(S.AGENDA_LIST, "Agenda List", "Basic", AgendaSkin),
    _d(S.COMPACT_MONTH, "Compact Month", "Basic", CompactMonthSkin),
    _d(S.THREE_DAY, "Three Days", "Basic", ThreeDaySkin),

    # Family
    _d(S.FAMILY_GRID, "Family Grid", "Family", MonthGridSkin),
    _d(S.FAMILY_ORBIT, "Family Orbit", "Family", WeekGridSkin),
    _d(S.FAMILY_PUZZLE, "Family Puzzle", "Family", MonthGridSkin),
    _d(S.FAMILY_GARDEN, "Family Garden", "Family", DayFocusSkin),
    _d(S.CARD_MONTH, "Card Month", "Family", MonthGridSkin),
    _d(S.YEAR_OVERVIEW, "Year Overview", "Family", YearOverviewSkin),

    # Visual
    _d(S.CLOUD_FLOATING, "Floating Clouds", "Visual", AgendaSkin),
    _d(S.CONSTELLATION_WHEEL, "Constellation Wheel", "Visual", AgendaSkin),
    _d(S.SUBWAY_MAP, "Subway Map", "Visual", TimelineSkin),
    _d(S.GARDEN_PLANT, "Garden", "Visual", DayFocusSkin),

    # Interactive
    _d(S.PUZZLE_PIECE, "Puzzle Pieces", "Interactive", MonthGridSkin),
    _d(S.FISHING_POND, "Fishing Pond", "Interactive", DayFocusSkin),
    _d(S.SPACE_EXPLORATION, "Space Exploration", "Interactive", AgendaSkin),
    _d(S.TREASURE_MAP, "Treasure Map", "Interactive", DayFocusSkin),

    # Data visualization
    _d(S.HEATMAP, "Heatmap", "Data visualization", CompactMonthSkin),
    _d(S.GANTT_CHART, "Gantt Chart", "Data visualization", TimelineSkin),
    _d(S.HEARTBEAT, "Heartbeat", "Data visualization", TimelineSkin),
    _d(S.BUBBLE_CHART, "Bubble Chart", "Data visualization", DatedMonthGridSkin),

    # Themed
    _d(S.SEASONAL_LANDSCAPE, "Seasonal Landscape", "Themed", DatedMonthGridSkin),
    _d(S.BOOKSHELF, "Bookshelf", "Themed", DatedMonthGridSkin),
    _d(S.MUSIC_STAFF, "Music Staff", "Themed", DatedMonthGridSkin),
    _d(S.KITCHEN_RECIPE, "Kitchen Recipe", "Themed", DatedMonthGridSkin),

    # Health
    _d(S.RUNNING_TRACK, "Running Track", "Health", DatedMonthGridSkin),
    _d(S.MOOD_DIARY, "Mood Diary", "Health", DatedMonthGridSkin),
    _d(S.FITNESS_CHALLENGE, "Fitness Challenge", "Health", DatedMonthGridSkin),

    # Future tech
    _d(S.CUBE_3D, "3D Cube", "Future tech", DatedMonthGridSkin),
    _d(S.AI_PREDICTION, "AI Prediction", "Future tech", DatedMonthGridSkin),
    _d(S.AR_VIEW, "AR View", "Future tech", TimestampMonthGridSkin),

    # Japanese family
    _d(S.SEASONAL_HARMONY, "Seasonal Harmony", "Japanese family", MonthGridSkin),
    _d(S.FAMILY_NOTEBOOK, "Family Notebook", "Japanese family", MonthGridSkin),
    _d(S.BENTO_BOX, "Bento Box", "Japanese family", WeekGridSkin),
    _d(S.ORIGAMI_CALENDAR, "Origami Calendar", "Japanese family", MonthGridSkin),
    _d(S.RYOKAN_STYLE, "Ryokan", "Japanese family", WeekGridSkin),
)}

del S


def get_descriptor(value) -> StyleDescriptor:
    """Descriptor for value; unknown values get the default style's descriptor."""
    return STYLE_REGISTRY[coerce_style(value)]


def resolve_strategy(value) -> type[SkinView]:
    """Skin class for a style id. Total: unknown ids resolve to the month grid."""
    descriptor: Optional[StyleDescriptor] = None
    if is_valid_style(value):
        descriptor = STYLE_REGISTRY.get(coerce_style(value))
    if descriptor is None:
        descriptor = STYLE_REGISTRY[DEFAULT_STYLE]
    return descriptor.strategy


def list_descriptors() -> list[StyleDescriptor]:
    """All descriptors in catalogue order."""
    return [STYLE_REGISTRY[style] for style in CalendarStyle]


def descriptors_by_category() -> dict[str, list[StyleDescriptor]]:
    """Descriptors grouped for the style picker, in CATEGORY_ORDER."""
    groups: dict[str, list[StyleDescriptor]] = {category: [] for category in CATEGORY_ORDER}
    for descriptor in list_descriptors():
        groups.setdefault(descriptor.category, []).append(descriptor)
    return groups
