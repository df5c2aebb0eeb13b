"""
Main Window for Family Calendar.

The primary application window with month navigation, the calendar skin
chosen by the user, and a status bar for confirmations.
"""

import base64
import binascii
from datetime import datetime, date, time as dt_time
from pathlib import Path
from typing import Iterable, Optional
import sys

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QToolBar, QPushButton, QLabel,
    QStatusBar, QSizePolicy
)
from PySide6.QtCore import Signal
from PySide6.QtGui import QCloseEvent, QFont, QKeySequence, QShortcut

from backend.config import Config
from backend.date_binning import format_month, parse_month, shift_month, start_of_month
from backend.event_model import Event
from backend.ics_import import load_ics_file
from backend.preference_storage import (
    PreferenceStorage, JsonPreferenceStorage, PreferenceStorageError
)
from backend.style_preferences import StylePreferenceStore
from backend.timezone_utils import localize, local_today, to_local_datetime

from .widgets.calendar_skins import (
    set_localization_config, get_localization_config, set_colors_config,
    set_labels_config, set_first_day_of_week
)
from .widgets.dispatch_shell import CalendarDispatchShell
from .widgets.event_widget import format_time_range
from .widgets.style_registry import get_descriptor

# State file key for the window geometry
GEOMETRY_KEY = "geometry"


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] WINDOW: {msg}", file=sys.stderr)


class MainWindow(QMainWindow):
    """
    Main application window.

    Contains:
    - Toolbar with month navigation and the style button
    - The dispatch shell showing the active calendar skin
    - Status bar with confirmations and event details
    """

    # Storage errors may be reported from the storage thread
    _error_reported = Signal(str)

    def __init__(
        self,
        config: Config,
        extra_ics_files: Iterable[str] = (),
        storage: Optional[PreferenceStorage] = None,
        parent=None
    ):
        super().__init__(parent)
        self.config = config

        # Set localization, colors, and labels for the skins BEFORE creating UI
        set_localization_config(config.localization)
        set_colors_config(config.colors)
        set_labels_config(config.labels)
        set_first_day_of_week(config.first_day_of_week)

        self._ics_files = [Path(p) for p in list(config.events.ics_files) + list(extra_ics_files)]

        self._storage = storage or JsonPreferenceStorage(config.state_file)
        self.style_store = StylePreferenceStore(
            self._storage,
            poll_interval_ms=config.style_poll_interval_ms,
            error_reporter=self._error_reported.emit,
            parent=self
        )

        self._setup_window()
        self._setup_ui()
        self._setup_toolbar()
        self._setup_shortcuts()
        self._setup_statusbar()

        self._initialize_data()

    def _setup_window(self):
        """Configure main window properties."""
        self.setWindowTitle(self.config.labels.window_title)
        self.setMinimumSize(600, 500)

        geometry = None
        try:
            geometry = self._storage.read(GEOMETRY_KEY)
        except PreferenceStorageError as e:
            _debug_print(f"Cannot restore window geometry: {e}")
        restored = False
        if geometry:
            try:
                restored = self.restoreGeometry(base64.b64decode(geometry, validate=True))
            except (binascii.Error, ValueError) as e:
                _debug_print(f"Ignoring invalid window geometry: {e}")
        if not restored:
            self.resize(1000, 750)

    def _setup_ui(self):
        """Set up the main UI layout."""
        self.shell = CalendarDispatchShell(self.style_store)
        self.shell.date_pressed.connect(self._on_date_pressed)
        self.shell.event_pressed.connect(self._on_event_pressed)
        self.shell.month_changed.connect(self._on_month_changed)
        self.shell.style_applied.connect(self._on_style_applied)
        self.setCentralWidget(self.shell)

    def _setup_toolbar(self):
        """Set up the navigation toolbar."""
        toolbar = QToolBar("Navigation")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        # Month label
        self._month_label = QLabel()
        month_font = QFont(self._month_label.font())
        month_font.setBold(True)
        self._month_label.setFont(month_font)
        self._month_label.setMinimumWidth(160)
        toolbar.addWidget(self._month_label)

        toolbar.addSeparator()

        # Navigation buttons
        self._prev_btn = QPushButton(self.config.labels.button_prev)
        self._prev_btn.setToolTip("Previous month")
        self._prev_btn.clicked.connect(self.go_previous)
        toolbar.addWidget(self._prev_btn)

        self._today_btn = QPushButton(self.config.labels.button_today)
        self._today_btn.clicked.connect(self.go_today)
        toolbar.addWidget(self._today_btn)

        self._next_btn = QPushButton(self.config.labels.button_next)
        self._next_btn.setToolTip("Next month")
        self._next_btn.clicked.connect(self.go_next)
        toolbar.addWidget(self._next_btn)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self._style_btn = QPushButton(self.config.labels.button_change_style)
        self._style_btn.setToolTip("Choose how the calendar looks (or long-press the calendar)")
        self._style_btn.clicked.connect(self.shell.open_style_picker)
        toolbar.addWidget(self._style_btn)

        self._quit_btn = QPushButton(self.config.labels.button_quit)
        self._quit_btn.setToolTip("Exit application")
        self._quit_btn.clicked.connect(self.close)
        toolbar.addWidget(self._quit_btn)

    def _setup_shortcuts(self):
        """Set up keyboard shortcuts."""
        prev_shortcut = QShortcut(QKeySequence("Ctrl+Left"), self)
        prev_shortcut.activated.connect(self.go_previous)

        next_shortcut = QShortcut(QKeySequence("Ctrl+Right"), self)
        next_shortcut.activated.connect(self.go_next)

        today_shortcut = QShortcut(QKeySequence("Ctrl+T"), self)
        today_shortcut.activated.connect(self.go_today)

    def _setup_statusbar(self):
        """Set up the status bar."""
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage("Ready")
        self._error_reported.connect(self._on_error_reported)

    # ==================== Data ====================

    def _event_window(self) -> tuple[datetime, datetime]:
        """Instant range of events to load around today."""
        this_month = start_of_month(local_today())
        first = shift_month(this_month, -self.config.events.months_before)
        after_last = shift_month(this_month, self.config.events.months_after + 1)
        return (
            localize(datetime.combine(first, dt_time.min)),
            localize(datetime.combine(after_last, dt_time.min)),
        )

    def load_events(self) -> list[Event]:
        """Read events from every configured .ics file."""
        start, end = self._event_window()
        events: list[Event] = []
        for path in self._ics_files:
            events.extend(load_ics_file(path, start, end))
        _debug_print(f"{len(events)} events from {len(self._ics_files)} files")
        return events

    def _initialize_data(self):
        today = local_today()
        self.shell.set_selected_date(today)
        self.shell.set_current_month(format_month(today))
        self.shell.set_events(self.load_events())

        self.shell.mount()
        self.style_store.start_watching()
        self._update_month_label()

    def _update_month_label(self):
        month = parse_month(self.shell.current_month)
        loc = get_localization_config()
        self._month_label.setText(f"{loc.get_month_name(month.month)} {month.year}")

    # ==================== Navigation ====================

    def go_previous(self):
        self._on_month_changed(format_month(shift_month(self.shell.current_month, -1)))

    def go_next(self):
        self._on_month_changed(format_month(shift_month(self.shell.current_month, 1)))

    def go_today(self):
        today = local_today()
        self.shell.set_current_month(format_month(today))
        self.shell.set_selected_date(today)
        self._update_month_label()

    # ==================== Shell signals ====================

    def _on_date_pressed(self, d: date):
        if format_month(d) != self.shell.current_month:
            self.shell.set_current_month(format_month(d))
            self._update_month_label()
        self.shell.set_selected_date(d)

    def _on_month_changed(self, month: str):
        self.shell.set_current_month(month)
        self._update_month_label()

    def _on_event_pressed(self, event: Event):
        start = to_local_datetime(event.start_time)
        details = f"{event.title} · {start.strftime('%Y-%m-%d')} {format_time_range(event)}"
        if event.location:
            details += f" · {event.location}"
        self._statusbar.showMessage(details)

    def _on_style_applied(self, style: str):
        name = get_descriptor(style).name
        self._statusbar.showMessage(self.config.labels.style_applied.format(name), 3000)

    def _on_error_reported(self, message: str):
        _debug_print(message)
        self._statusbar.showMessage(message, 5000)

    # ==================== Shutdown ====================

    def closeEvent(self, event: QCloseEvent):
        """Handle window close."""
        self.style_store.shutdown()

        try:
            geometry = base64.b64encode(self.saveGeometry().data()).decode('ascii')
            self._storage.write(GEOMETRY_KEY, geometry)
        except PreferenceStorageError as e:
            _debug_print(f"Cannot save window geometry: {e}")

        super().closeEvent(event)
