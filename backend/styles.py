"""
Closed catalogue of calendar style identifiers.

The identifiers are what gets persisted, so they never change spelling.
Values read back from storage or handed in by other parts of the program
are checked against this set and fall back to the default style.
"""

from datetime import datetime
from enum import Enum
import sys


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] STYLES: {msg}", file=sys.stderr)


class CalendarStyle(Enum):
    # Recommended
    GRID_MONTH = "grid-month"
    WEEKLY_GRID = "weekly-grid"
    TIMELINE = "timeline"

    # Basic
    DAY_FOCUS = "day-focus"
    AGENDA_LIST = "agenda-list"
    COMPACT_MONTH = "compact-month"
    THREE_DAY = "three-day"

    # Family
    FAMILY_GRID = "family-grid"
    FAMILY_ORBIT = "family-orbit"
    FAMILY_PUZZLE = "family-puzzle"
    FAMILY_GARDEN = "family-garden"
    CARD_MONTH = "card-month"
    YEAR_OVERVIEW = "year-overview"

    # Visual
    CLOUD_FLOATING = "cloud-floating"
    CONSTELLATION_WHEEL = "constellation-wheel"
    SUBWAY_MAP = "subway-map"
    GARDEN_PLANT = "garden-plant"

    # Interactive
    PUZZLE_PIECE = "puzzle-piece"
    FISHING_POND = "fishing-pond"
    SPACE_EXPLORATION = "space-exploration"
    TREASURE_MAP = "treasure-map"

    # Data visualization
    HEATMAP = "heatmap"
    GANTT_CHART = "gantt-chart"
    HEARTBEAT = "heartbeat"
    BUBBLE_CHART = "bubble-chart"

    # Themed
    SEASONAL_LANDSCAPE = "seasonal-landscape"
    BOOKSHELF = "bookshelf"
    MUSIC_STAFF = "music-staff"
    KITCHEN_RECIPE = "kitchen-recipe"

    # Health
    RUNNING_TRACK = "running-track"
    MOOD_DIARY = "mood-diary"
    FITNESS_CHALLENGE = "fitness-challenge"

    # Future tech
    CUBE_3D = "cube-3d"
    AI_PREDICTION = "ai-prediction"
    AR_VIEW = "ar-view"

    # Japanese family
    SEASONAL_HARMONY = "seasonal-harmony"
    FAMILY_NOTEBOOK = "family-notebook"
    BENTO_BOX = "bento-box"
    ORIGAMI_CALENDAR = "origami-calendar"
    RYOKAN_STYLE = "ryokan-style"


DEFAULT_STYLE = CalendarStyle.GRID_MONTH

_STYLE_VALUES = frozenset(style.value for style in CalendarStyle)


class DataShape(Enum):
    """
    The shape of props a rendering strategy is written against.

    COMMON: Event records, selected_date, on_date_press.
    TIMESTAMP: plain records carrying start_ts/end_ts Unix seconds.
    DATED: plain records carrying a pre-converted local "date", with the
        current_date/on_date_select prop names.
    """
    COMMON = "common"
    TIMESTAMP = "timestamp"
    DATED = "dated"


def is_valid_style(value) -> bool:
    """Whether value names a member of the closed style set."""
    if isinstance(value, CalendarStyle):
        return True
    return isinstance(value, str) and value in _STYLE_VALUES


def coerce_style(value) -> CalendarStyle:
    """Map value onto a CalendarStyle, falling back to the default."""
    if isinstance(value, CalendarStyle):
        return value
    if is_valid_style(value):
        return CalendarStyle(value)
    _debug_print(f"Unknown calendar style {value!r}, using {DEFAULT_STYLE.value}")
    return DEFAULT_STYLE
