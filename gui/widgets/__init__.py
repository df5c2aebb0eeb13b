"""
Family Calendar GUI Widgets

Calendar skins, the style registry and the dispatch shell that switches
between them.
"""

from .event_widget import EventWidget
from .calendar_skins import (
    SkinView, MonthGridSkin, CompactMonthSkin, WeekGridSkin, ThreeDaySkin,
    DayFocusSkin, TimelineSkin, AgendaSkin, YearOverviewSkin,
    DatedMonthGridSkin, TimestampMonthGridSkin
)
from .style_registry import StyleDescriptor, STYLE_REGISTRY, resolve_strategy
from .dispatch_shell import CalendarDispatchShell, ShellPhase

__all__ = [
    'EventWidget',
    'SkinView', 'MonthGridSkin', 'CompactMonthSkin', 'WeekGridSkin', 'ThreeDaySkin',
    'DayFocusSkin', 'TimelineSkin', 'AgendaSkin', 'YearOverviewSkin',
    'DatedMonthGridSkin', 'TimestampMonthGridSkin',
    'StyleDescriptor', 'STYLE_REGISTRY', 'resolve_strategy',
    'CalendarDispatchShell', 'ShellPhase',
]
