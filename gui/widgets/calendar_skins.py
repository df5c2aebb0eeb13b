"""
Calendar skins: the rendering strategies the dispatch shell chooses from.

Every style in the catalogue maps onto one of the layout families below.
Skins never compute day membership themselves; they ask
backend.date_binning for grids and bins and only lay out the result.
"""

from datetime import date, timedelta
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QScrollArea, QFrame, QPushButton, QSizePolicy
)
from PySide6.QtCore import Qt, Signal, QTimer
from PySide6.QtGui import QFont, QMouseEvent

from backend.config import LocalizationConfig, ColorsConfig, LabelsConfig
from backend.date_binning import (
    GridCell, build_month_grid, bin_events_by_day, events_on_day,
    enumerate_days, start_of_month, end_of_month, parse_month,
    shift_month, format_month, week_days, is_today
)
from backend.styles import DataShape
from backend.timezone_utils import to_local_datetime
from .event_widget import EventWidget, set_event_colors_config

# Module-level configs (set by MainWindow at startup)
_localization_config: LocalizationConfig = LocalizationConfig()
_colors_config: ColorsConfig = ColorsConfig()
_labels_config: LabelsConfig = LabelsConfig()
_first_day_of_week: int = 0

# Press duration that counts as a long press (opens the style picker)
LONG_PRESS_MS = 600


def set_localization_config(config: LocalizationConfig):
    """Set the localization configuration for this module."""
    global _localization_config
    _localization_config = config


def get_localization_config() -> LocalizationConfig:
    """Get the current localization configuration."""
    return _localization_config


def set_colors_config(config: ColorsConfig):
    """Set the colors configuration for this module and event widget."""
    global _colors_config
    _colors_config = config
    set_event_colors_config(config)


def get_colors_config() -> ColorsConfig:
    """Get the current colors configuration."""
    return _colors_config


def set_labels_config(config: LabelsConfig):
    """Set the labels configuration for this module."""
    global _labels_config
    _labels_config = config


def get_labels_config() -> LabelsConfig:
    """Get the current labels configuration."""
    return _labels_config


def set_first_day_of_week(weekday: int):
    """Set the first column of week-based layouts (0=Monday, 6=Sunday)."""
    global _first_day_of_week
    _first_day_of_week = weekday


def get_first_day_of_week() -> int:
    return _first_day_of_week


def _clear_layout(layout):
    """Remove and schedule deletion of everything in a layout."""
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.setParent(None)
            widget.deleteLater()
        elif item.layout() is not None:
            _clear_layout(item.layout())


def _month_title(month: date) -> str:
    return f"{_localization_config.get_month_name(month.month)} {month.year}"


def _day_title(day: date) -> str:
    return f"{_localization_config.get_day_name(day.weekday())} {day.day} " \
           f"{_localization_config.get_month_name(day.month)}"


class NavigationHeader(QWidget):
    """Title with previous/next buttons."""

    prev_clicked = Signal()
    next_clicked = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        self._prev_button = QPushButton(_labels_config.button_prev)
        self._prev_button.clicked.connect(self.prev_clicked.emit)
        layout.addWidget(self._prev_button)

        self._title = QLabel()
        self._title.setAlignment(Qt.AlignCenter)
        title_font = QFont(self._title.font())
        title_font.setBold(True)
        self._title.setFont(title_font)
        layout.addWidget(self._title, 1)

        self._next_button = QPushButton(_labels_config.button_next)
        self._next_button.clicked.connect(self.next_clicked.emit)
        layout.addWidget(self._next_button)

    def set_title(self, text: str):
        self._title.setText(text)

    def title(self) -> str:
        return self._title.text()


class SkinView(QWidget):
    """
    Base class for rendering strategies.

    data_shape declares which props shape the skin is written against.
    The accessors below read the common shape; skins written against a
    legacy shape override them instead of branching on the shape.
    """

    data_shape = DataShape.COMMON

    # Emitted when the skin surface is pressed and held
    long_pressed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._props = None
        self._long_press_timer = QTimer(self)
        self._long_press_timer.setSingleShot(True)
        self._long_press_timer.setInterval(LONG_PRESS_MS)
        self._long_press_timer.timeout.connect(self.long_pressed.emit)
        self._setup_ui()

    def _setup_ui(self):
        pass

    @property
    def props(self):
        return self._props

    def set_props(self, props):
        """Render the skin for new props."""
        self._props = props
        self.refresh()

    def refresh(self):
        raise NotImplementedError

    # ==================== Props accessors ====================

    def events(self):
        return self._props.events

    def selected_date(self) -> date:
        return self._props.selected_date

    def current_month(self) -> date:
        return parse_month(self._props.current_month)

    def press_date(self, d: date):
        self._props.on_date_press(d)

    def press_event(self, event):
        self._props.on_event_press(event)

    def change_month(self, month: date):
        if self._props.on_month_change is not None:
            self._props.on_month_change(format_month(month))

    # ==================== Long press ====================

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self._long_press_timer.start()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._long_press_timer.stop()
        super().mouseReleaseEvent(event)


# ==================== Month grid family ====================

class MonthDayCell(QFrame):
    """Single day cell in a month grid."""

    clicked = Signal(object)        # date
    event_clicked = Signal(object)  # event

    def __init__(self, parent=None):
        super().__init__(parent)
        self._cell: Optional[GridCell] = None
        self._event_widgets: list[QWidget] = []
        self._setup_ui()

    def _setup_ui(self):
        self.setFrameStyle(QFrame.Box | QFrame.Plain)
        self.setMinimumSize(60, 60)
        self.setCursor(Qt.PointingHandCursor)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        self._day_label = QLabel()
        self._day_label.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        layout.addWidget(self._day_label)

        self._events_layout = QVBoxLayout()
        self._events_layout.setSpacing(1)
        layout.addLayout(self._events_layout)
        layout.addStretch()

    @property
    def cell(self) -> Optional[GridCell]:
        return self._cell

    def set_cell(self, cell: GridCell, selected: bool, max_events: int):
        self._cell = cell
        self._day_label.setText(str(cell.date.day))
        _clear_layout(self._events_layout)
        self._event_widgets.clear()

        shown = cell.events[:max_events]
        for event in shown:
            widget = EventWidget(event, compact=True, show_time=False, show_location=False)
            widget.clicked.connect(self.event_clicked.emit)
            self._events_layout.addWidget(widget)
            self._event_widgets.append(widget)
        hidden = len(cell.events) - len(shown)
        if hidden > 0:
            more = QLabel(_labels_config.more_events.format(hidden))
            more.setStyleSheet(f"color: {_colors_config.secondary_text};")
            self._events_layout.addWidget(more)
            self._event_widgets.append(more)

        self._update_style(selected)

    def _update_style(self, selected: bool):
        colors = _colors_config
        current = not self._cell.is_padding
        bg = colors.month_cell_current if current else colors.month_cell_other
        text = colors.month_text_current if current else colors.month_text_other
        border = colors.selected_day_border if selected else colors.cell_border

        if self._cell.is_today:
            self._day_label.setStyleSheet(f"color: {colors.today_highlight_text}; font-weight: bold; background: {colors.today_highlight_background}; border-radius: 10px; padding: 2px 6px;")
        else:
            self._day_label.setStyleSheet(f"color: {text};")
        self.setStyleSheet(f"MonthDayCell {{ background-color: {bg}; border: 1px solid {border}; }}")

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton and self._cell is not None:
            self.clicked.emit(self._cell.date)
        super().mousePressEvent(event)


class MonthGridSkin(SkinView):
    """Classic 6x7 month grid."""

    max_events_per_cell = 3

    def _setup_ui(self):
        self._grid: list[GridCell] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._header = NavigationHeader()
        self._header.prev_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), -1)))
        self._header.next_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), 1)))
        layout.addWidget(self._header)

        names = QWidget()
        names_layout = QHBoxLayout(names)
        names_layout.setContentsMargins(0, 0, 0, 0)
        names_layout.setSpacing(1)
        self._day_name_labels = []
        for _ in range(7):
            label = QLabel()
            label.setAlignment(Qt.AlignCenter)
            label.setStyleSheet(f"font-weight: bold; padding: 8px; background: {_colors_config.header_background};")
            names_layout.addWidget(label, 1)
            self._day_name_labels.append(label)
        layout.addWidget(names)

        grid_widget = QWidget()
        grid_layout = QGridLayout(grid_widget)
        grid_layout.setContentsMargins(0, 0, 0, 0)
        grid_layout.setSpacing(1)
        for col in range(7):
            grid_layout.setColumnStretch(col, 1)

        self._cells: list[MonthDayCell] = []
        for row in range(6):
            for col in range(7):
                cell = MonthDayCell()
                cell.clicked.connect(self.press_date)
                cell.event_clicked.connect(self.press_event)
                grid_layout.addWidget(cell, row, col)
                self._cells.append(cell)
        layout.addWidget(grid_widget, 1)

    @property
    def grid(self) -> list[GridCell]:
        return self._grid

    def refresh(self):
        month = self.current_month()
        first_day = get_first_day_of_week()
        self._header.set_title(_month_title(month))
        for i, label in enumerate(self._day_name_labels):
            label.setText(_localization_config.get_day_name((first_day + i) % 7))

        self._grid = build_month_grid(month, first_day, self.events())
        selected = self.selected_date()
        for widget, cell in zip(self._cells, self._grid):
            widget.set_cell(cell, cell.date == selected and not cell.is_padding, self.max_events_per_cell)


class CompactMonthSkin(MonthGridSkin):
    """Month grid showing only a count per day."""

    max_events_per_cell = 0


class TimestampMonthGridSkin(MonthGridSkin):
    """Month grid written against timestamp records (start_ts/end_ts)."""

    data_shape = DataShape.TIMESTAMP


class DatedMonthGridSkin(MonthGridSkin):
    """Month grid written against records with a pre-converted date."""

    data_shape = DataShape.DATED

    def selected_date(self) -> date:
        return self._props.current_date

    def press_date(self, d: date):
        self._props.on_date_select(d)


# ==================== Day-column family ====================

class DayColumn(QFrame):
    """Header plus the ordered events of one day."""

    clicked = Signal(object)        # date
    event_clicked = Signal(object)  # event

    def __init__(self, day: date, events: list, selected: bool, parent=None):
        super().__init__(parent)
        self.day = day
        self.events = events
        self.setFrameStyle(QFrame.Box | QFrame.Plain)
        border = _colors_config.selected_day_border if selected else _colors_config.cell_border
        self.setStyleSheet(f"DayColumn {{ border: 1px solid {border}; }}")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        header = QLabel(f"{_localization_config.get_day_name(day.weekday())} {day.day}")
        header.setAlignment(Qt.AlignCenter)
        if is_today(day):
            header.setStyleSheet(f"color: {_colors_config.today_highlight_text}; font-weight: bold; background: {_colors_config.today_highlight_background};")
        else:
            header.setStyleSheet(f"font-weight: bold; background: {_colors_config.header_background};")
        layout.addWidget(header)

        for event in events:
            widget = EventWidget(event, compact=False, show_time=True, show_location=False)
            widget.clicked.connect(self.event_clicked.emit)
            layout.addWidget(widget)
        if not events:
            empty = QLabel(_labels_config.no_events)
            empty.setAlignment(Qt.AlignCenter)
            empty.setStyleSheet(f"color: {_colors_config.secondary_text};")
            layout.addWidget(empty)
        layout.addStretch()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.day)
        super().mousePressEvent(event)


class WeekGridSkin(SkinView):
    """Side-by-side day columns for the selected date's week."""

    days_shown = 7

    def _setup_ui(self):
        self._bins: dict[date, list] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._header = NavigationHeader()
        self._header.prev_clicked.connect(lambda: self._step(-self.days_shown))
        self._header.next_clicked.connect(lambda: self._step(self.days_shown))
        layout.addWidget(self._header)

        self._columns_layout = QHBoxLayout()
        self._columns_layout.setSpacing(1)
        layout.addLayout(self._columns_layout, 1)

    @property
    def bins(self) -> dict[date, list]:
        return self._bins

    def visible_days(self) -> list[date]:
        return week_days(self.selected_date(), get_first_day_of_week(), self.days_shown)

    def _step(self, days: int):
        target = self.selected_date() + timedelta(days=days)
        if (target.year, target.month) != (self.current_month().year, self.current_month().month):
            self.change_month(target)
        self.press_date(target)

    def refresh(self):
        days = self.visible_days()
        self._header.set_title(f"{_day_title(days[0])} - {_day_title(days[-1])}")
        self._bins = bin_events_by_day(self.events(), days)

        _clear_layout(self._columns_layout)
        selected = self.selected_date()
        for day in days:
            column = DayColumn(day, self._bins[day], day == selected)
            column.clicked.connect(self.press_date)
            column.event_clicked.connect(self.press_event)
            self._columns_layout.addWidget(column, 1)


class ThreeDaySkin(WeekGridSkin):
    """The selected day and the two following days."""

    days_shown = 3

    def visible_days(self) -> list[date]:
        start = self.selected_date()
        return list(enumerate_days(start, start + timedelta(days=self.days_shown - 1)))


# ==================== Single-day family ====================

class DayFocusSkin(SkinView):
    """The selected day's events as a vertical list."""

    show_times = False

    def _setup_ui(self):
        self._day_events: list = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._header = NavigationHeader()
        self._header.prev_clicked.connect(lambda: self._step(-1))
        self._header.next_clicked.connect(lambda: self._step(1))
        layout.addWidget(self._header)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        content = QWidget()
        self._list_layout = QVBoxLayout(content)
        self._list_layout.setSpacing(4)
        scroll.setWidget(content)
        layout.addWidget(scroll, 1)

    @property
    def day_events(self) -> list:
        return self._day_events

    def _step(self, days: int):
        target = self.selected_date() + timedelta(days=days)
        if (target.year, target.month) != (self.current_month().year, self.current_month().month):
            self.change_month(target)
        self.press_date(target)

    def _event_row(self, event) -> QWidget:
        widget = EventWidget(event, compact=False, show_time=not self.show_times)
        widget.clicked.connect(self.press_event)
        return widget

    def refresh(self):
        day = self.selected_date()
        self._header.set_title(_day_title(day))
        self._day_events = events_on_day(self.events(), day)

        _clear_layout(self._list_layout)
        for event in self._day_events:
            self._list_layout.addWidget(self._event_row(event))
        if not self._day_events:
            empty = QLabel(_labels_config.no_events)
            empty.setAlignment(Qt.AlignCenter)
            empty.setStyleSheet(f"color: {_colors_config.secondary_text};")
            self._list_layout.addWidget(empty)
        self._list_layout.addStretch()


class TimelineSkin(DayFocusSkin):
    """Single day with a time column next to each event."""

    show_times = True

    def _event_row(self, event) -> QWidget:
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)
        time_label = QLabel(to_local_datetime(event.start_time).strftime('%H:%M'))
        time_label.setAlignment(Qt.AlignRight | Qt.AlignTop)
        time_label.setFixedWidth(50)
        row_layout.addWidget(time_label)
        row_layout.addWidget(super()._event_row(event), 1)
        return row


# ==================== Month list family ====================

class AgendaSkin(SkinView):
    """Days of the current month that have events, in order."""

    def _setup_ui(self):
        self._bins: dict[date, list] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._header = NavigationHeader()
        self._header.prev_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), -1)))
        self._header.next_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), 1)))
        layout.addWidget(self._header)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.NoFrame)
        content = QWidget()
        self._list_layout = QVBoxLayout(content)
        self._list_layout.setSpacing(4)
        scroll.setWidget(content)
        layout.addWidget(scroll, 1)

    @property
    def bins(self) -> dict[date, list]:
        return self._bins

    def refresh(self):
        month = self.current_month()
        self._header.set_title(_month_title(month))
        self._bins = bin_events_by_day(self.events(), enumerate_days(start_of_month(month), end_of_month(month)))

        _clear_layout(self._list_layout)
        busy_days = [day for day, events in self._bins.items() if events]
        for day in busy_days:
            day_button = QPushButton(_day_title(day))
            day_button.setFlat(True)
            day_button.setStyleSheet("text-align: left; font-weight: bold;")
            day_button.clicked.connect(lambda _checked=False, d=day: self.press_date(d))
            self._list_layout.addWidget(day_button)
            for event in self._bins[day]:
                widget = EventWidget(event, compact=False, show_time=True)
                widget.clicked.connect(self.press_event)
                self._list_layout.addWidget(widget)
        if not busy_days:
            empty = QLabel(_labels_config.no_events)
            empty.setAlignment(Qt.AlignCenter)
            empty.setStyleSheet(f"color: {_colors_config.secondary_text};")
            self._list_layout.addWidget(empty)
        self._list_layout.addStretch()


# ==================== Year family ====================

class YearOverviewSkin(SkinView):
    """Twelve month tiles with event counts for the current year."""

    def _setup_ui(self):
        self._counts: dict[int, int] = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._header = NavigationHeader()
        self._header.prev_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), -12)))
        self._header.next_clicked.connect(lambda: self.change_month(shift_month(self.current_month(), 12)))
        layout.addWidget(self._header)

        tiles = QWidget()
        tiles_layout = QGridLayout(tiles)
        self._tiles: list[QPushButton] = []
        for index in range(12):
            tile = QPushButton()
            tile.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
            tile.clicked.connect(lambda _checked=False, m=index + 1: self._open_month(m))
            tiles_layout.addWidget(tile, index // 3, index % 3)
            self._tiles.append(tile)
        layout.addWidget(tiles, 1)

    @property
    def counts(self) -> dict[int, int]:
        return self._counts

    def _open_month(self, month: int):
        target = date(self.current_month().year, month, 1)
        self.change_month(target)
        self.press_date(target)

    def refresh(self):
        year = self.current_month().year
        self._header.set_title(str(year))
        bins = bin_events_by_day(self.events(), enumerate_days(date(year, 1, 1), date(year, 12, 31)))

        self._counts = {month: 0 for month in range(1, 13)}
        for day, events in bins.items():
            self._counts[day.month] += len(events)

        for index, tile in enumerate(self._tiles):
            month = index + 1
            tile.setText(f"{_localization_config.get_month_name(month)}\n{self._counts[month]}")
