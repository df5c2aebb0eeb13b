"""
Dispatch shell: shows the skin for the active calendar style.

The shell follows the StylePreferenceStore, keeps one instance per skin
class in a QStackedWidget, converts the common props into the shape the
active skin declares and forwards user interactions to the host as
signals.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional
import sys

from PySide6.QtWidgets import QWidget, QVBoxLayout, QStackedWidget, QDialog
from PySide6.QtCore import Signal

from backend.event_model import Event, normalize_events
from backend.date_binning import format_month, parse_month
from backend.styles import CalendarStyle, coerce_style
from backend.style_preferences import StylePreferenceStore
from backend.timezone_utils import local_today, to_local_date
from .calendar_skins import SkinView
from .style_registry import resolve_strategy
from .view_props import CalendarViewProps, adapt_props


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] SHELL: {msg}", file=sys.stderr)


class ShellPhase(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class CalendarDispatchShell(QWidget):
    """
    Widget that renders the active style's skin.

    Call mount() once the host is ready; before that the shell shows
    nothing. After mounting, store notifications and set_style_override()
    switch skins; switching to the style already shown does nothing.
    """

    date_pressed = Signal(object)       # date
    event_pressed = Signal(object)      # Event
    month_changed = Signal(str)         # "YYYY-MM"
    style_applied = Signal(str)         # style id chosen in the picker
    style_picker_requested = Signal()

    def __init__(self, store: StylePreferenceStore, parent=None):
        super().__init__(parent)
        self._store = store
        self._phase = ShellPhase.UNINITIALIZED
        self._active_style: Optional[CalendarStyle] = None

        self._events: tuple[Event, ...] = ()
        self._events_by_id: dict[str, Event] = {}
        self._selected_date: date = local_today()
        self._current_month: str = format_month(self._selected_date)

        # Cache of skin instances, one per skin class
        self._views: dict[type[SkinView], SkinView] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self._stack = QStackedWidget()
        layout.addWidget(self._stack)

    # ==================== State machine ====================

    @property
    def phase(self) -> ShellPhase:
        return self._phase

    @property
    def active_style(self) -> Optional[CalendarStyle]:
        return self._active_style

    def mount(self) -> None:
        """Enter READY with the store's current style and follow its changes."""
        if self._phase == ShellPhase.READY:
            return
        style = self._store.style
        self._store.style_changed.connect(self._on_store_changed)
        self._phase = ShellPhase.READY
        self._active_style = style
        _debug_print(f"Mounted with style {style.value}")
        self._render()

    def set_style_override(self, value) -> None:
        """Show value's skin without persisting it."""
        self._transition(coerce_style(value))

    def _on_store_changed(self, value: str) -> None:
        self._transition(coerce_style(value))

    def _transition(self, style: CalendarStyle) -> None:
        if self._phase != ShellPhase.READY:
            return
        if style == self._active_style:
            return
        _debug_print(f"Style {self._active_style.value} -> {style.value}")
        self._active_style = style
        self._render()

    # ==================== Inputs ====================

    def set_events(self, events: Iterable) -> None:
        """Replace the event collection; invalid records are dropped."""
        normalized = normalize_events(events)
        self._events = tuple(normalized)
        self._events_by_id = {}
        for event in normalized:
            self._events_by_id.setdefault(event.id, event)
        self._render()

    @property
    def events(self) -> tuple[Event, ...]:
        return self._events

    def set_selected_date(self, value) -> None:
        self._selected_date = to_local_date(value)
        self._render()

    @property
    def selected_date(self) -> date:
        return self._selected_date

    def set_current_month(self, month) -> None:
        self._current_month = format_month(parse_month(month))
        self._render()

    @property
    def current_month(self) -> str:
        return self._current_month

    # ==================== Rendering ====================

    def current_view(self) -> Optional[SkinView]:
        """The skin instance currently shown (None before mount)."""
        if self._phase != ShellPhase.READY:
            return None
        return self._views.get(resolve_strategy(self._active_style))

    def _view_for(self, strategy: type[SkinView]) -> SkinView:
        view = self._views.get(strategy)
        if view is None:
            view = strategy()
            view.long_pressed.connect(self.open_style_picker)
            self._stack.addWidget(view)
            self._views[strategy] = view
        return view

    def _props(self) -> CalendarViewProps:
        return CalendarViewProps(
            events=self._events,
            selected_date=self._selected_date,
            current_month=self._current_month,
            on_date_press=self.date_pressed.emit,
            on_event_press=self._on_event_press,
            on_month_change=self.month_changed.emit,
        )

    def _render(self) -> None:
        if self._phase != ShellPhase.READY:
            return
        strategy = resolve_strategy(self._active_style)
        view = self._view_for(strategy)
        view.set_props(adapt_props(strategy.data_shape, self._props()))
        self._stack.setCurrentWidget(view)

    def _on_event_press(self, pressed) -> None:
        # Skins on legacy shapes hand back their own records or freshly
        # normalized copies; the host always gets the original Event.
        if isinstance(pressed, Event):
            event_id = pressed.id
        else:
            event_id = pressed.get('id') if hasattr(pressed, 'get') else None
        original = self._events_by_id.get(event_id)
        if original is None:
            _debug_print(f"Pressed event {event_id!r} is not in the collection")
            return
        self.event_pressed.emit(original)

    # ==================== Style picker ====================

    def open_style_picker(self) -> None:
        """Show the style picker; an accepted choice becomes the active style."""
        self.style_picker_requested.emit()
        from gui.style_picker import StylePickerDialog

        dialog = StylePickerDialog(self._store.style, parent=self)
        if dialog.exec() == QDialog.Accepted and dialog.selected_style() is not None:
            self.apply_picked_style(dialog.selected_style())

    def apply_picked_style(self, value) -> CalendarStyle:
        """Persist a style chosen by the user and announce it."""
        style = self._store.set_style(value)
        # The store stays silent if it already held this style while an
        # override was shown.
        self._transition(style)
        self.style_applied.emit(style.value)
        return style
