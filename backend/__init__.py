"""
Family Calendar Backend Module

This module provides the core functionality behind the calendar views:
- Configuration parsing (config.py)
- Event records and normalization (event_model.py)
- Day, week and month binning (date_binning.py)
- The calendar style catalogue (styles.py)
- Style preference store with background persistence (style_preferences.py)
- Event ingestion from .ics files (ics_import.py)
"""

from .config import Config
from .event_model import Event, InvalidEvent, normalize, normalize_events
from .styles import CalendarStyle, DataShape, DEFAULT_STYLE, is_valid_style
from .preference_storage import (
    PreferenceStorage, JsonPreferenceStorage, MemoryPreferenceStorage, PreferenceStorageError
)
from .style_preferences import StylePreferenceStore

__all__ = [
    'Config',
    'Event',
    'InvalidEvent',
    'normalize',
    'normalize_events',
    'CalendarStyle',
    'DataShape',
    'DEFAULT_STYLE',
    'is_valid_style',
    'PreferenceStorage',
    'JsonPreferenceStorage',
    'MemoryPreferenceStorage',
    'PreferenceStorageError',
    'StylePreferenceStore',
]
