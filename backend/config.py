"""
Configuration parser for Family Calendar.

Handles TOML file parsing. Every setting has a default, so a missing
default configuration file simply means default settings.
"""

import tomllib
import os
import sys
from pathlib import Path
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CONFIG: {msg}", file=sys.stderr)


@dataclass
class EventsConfig:
    """Configuration for event ingestion from local .ics files."""
    ics_files: list[str] = field(default_factory=list)
    months_before: int = 3   # Months of history to load
    months_after: int = 12   # Months ahead to load


@dataclass
class ColorsConfig:
    """Configuration for UI colors."""
    # Grid Colors
    cell_border: str = "#e0e0e0"
    header_background: str = "#f5f5f5"

    # Today / selection
    today_highlight_background: str = "#e3f2fd"
    today_highlight_text: str = "#1976d2"
    selected_day_border: str = "#1976d2"

    # Month Grid Colors
    month_cell_current: str = "#ffffff"
    month_cell_other: str = "#f5f5f5"
    month_text_current: str = "#000000"
    month_text_other: str = "#999999"

    # Events
    event_default: str = "#4285f4"
    secondary_text: str = "rgba(0, 0, 0, 0.6)"


@dataclass
class LabelsConfig:
    """Configuration for UI labels."""
    # Main Window Labels
    window_title: str = "Family Calendar"

    # Toolbar Button Labels
    button_prev: str = "◀"
    button_next: str = "▶"
    button_today: str = "Today"
    button_change_style: str = "Style…"
    button_quit: str = "Quit"

    # Style Picker Labels
    picker_title: str = "Choose Calendar Style"
    picker_hint: str = "Long-press the calendar to reopen this list"
    button_apply: str = "Apply"
    button_cancel: str = "Cancel"
    style_applied: str = "Calendar style changed to {}"

    # Miscellaneous Labels
    allday_label: str = "All day"
    no_events: str = "No events"
    more_events: str = "+{} more"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Default to English abbreviated day names
    day_names: list[str] = None  # Mon Tue Wed Thu Fri Sat Sun
    # Default to English full month names
    month_names: list[str] = None  # January February ... December

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""


def _section(cls, values: dict):
    """Build a section dataclass from a TOML table, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    for key in values:
        if key not in known:
            _debug_print(f"Ignoring unknown setting '{key}' for {cls.__name__}")
    return cls(**{k: v for k, v in values.items() if k in known})


@dataclass
class Config:
    """Main configuration container for Family Calendar."""

    state_file: Path
    timezone: str = "Europe/Amsterdam"
    first_day_of_week: int = 0      # 0=Monday ... 6=Sunday
    style_poll_interval: float = 2.0  # Seconds between style reconciliations (0 to disable)
    events: EventsConfig = field(default_factory=EventsConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    colors: ColorsConfig = field(default_factory=ColorsConfig)
    labels: LabelsConfig = field(default_factory=LabelsConfig)

    @property
    def style_poll_interval_ms(self) -> int:
        return max(0, int(self.style_poll_interval * 1000))

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'family-calendar' / 'family-calendar.toml'

    @classmethod
    def get_default_state_path(cls) -> Path:
        """Get the default state file path."""
        xdg_state = os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state'))
        return Path(xdg_state) / 'family-calendar' / 'state.json'

    @classmethod
    def default(cls) -> 'Config':
        return cls(state_file=cls.get_default_state_path())

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from TOML file.

        Raises:
            FileNotFoundError: if an explicitly given file does not exist.
            ValueError: for invalid values.
        """
        if config_path is None:
            config_path = cls.get_default_config_path()
            if not config_path.exists():
                _debug_print(f"No configuration at {config_path}, using defaults")
                return cls.default()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from parsed TOML data."""
        # Parse General section
        general = data.get('General', {})
        state_file_str = general.get('state_file', str(cls.get_default_state_path()))
        state_file = Path(os.path.expanduser(state_file_str))

        first_day_of_week = general.get('first_day_of_week', 0)
        if (isinstance(first_day_of_week, bool) or not isinstance(first_day_of_week, int)
                or not 0 <= first_day_of_week <= 6):
            raise ValueError(f"first_day_of_week must be 0-6, got {first_day_of_week!r}")

        style_poll_interval = general.get('style_poll_interval', 2.0)
        if not isinstance(style_poll_interval, (int, float)) or style_poll_interval < 0:
            raise ValueError(f"style_poll_interval must be >= 0, got {style_poll_interval!r}")

        # Parse Events section
        events_data = dict(data.get('Events', {}))
        events_data['ics_files'] = [
            os.path.expanduser(p) for p in events_data.get('ics_files', [])
        ]
        events = _section(EventsConfig, events_data)

        # Parse Localization section (space-separated names, if provided)
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')
        localization = LocalizationConfig(
            day_names=day_names_str.split() if day_names_str else None,
            month_names=month_names_str.split() if month_names_str else None
        )

        return cls(
            state_file=state_file,
            timezone=general.get('timezone', 'Europe/Amsterdam'),
            first_day_of_week=first_day_of_week,
            style_poll_interval=float(style_poll_interval),
            events=events,
            localization=localization,
            colors=_section(ColorsConfig, data.get('Colors', {})),
            labels=_section(LabelsConfig, data.get('Labels', {})),
        )


EXAMPLE_CONFIG = """
[General]
timezone = "Europe/Amsterdam"
first_day_of_week = 0        # 0=Monday ... 6=Sunday
style_poll_interval = 2.0    # seconds, 0 disables polling

[Events]
ics_files = ["~/calendars/family.ics"]
months_before = 3
months_after = 12

[Localization]
day_names = "Mon Tue Wed Thu Fri Sat Sun"
"""
