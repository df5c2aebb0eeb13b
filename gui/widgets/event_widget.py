"""
Event Widget for displaying individual calendar events inside a skin.

Shows the event title (and optionally its time and location) colored by
the event's own color.
"""

from PySide6.QtWidgets import (
    QWidget, QLabel, QVBoxLayout, QHBoxLayout,
    QFrame, QSizePolicy
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QMouseEvent

from backend.config import ColorsConfig
from backend.event_model import Event
from backend.timezone_utils import to_local_datetime

# Module-level configs (set by MainWindow at startup via calendar_skins)
_colors_config: ColorsConfig = ColorsConfig()


def set_event_colors_config(config: ColorsConfig):
    """Set the colors configuration for event widgets."""
    global _colors_config
    _colors_config = config


def get_contrasting_text_color(bg_color: str) -> str:
    """Calculate whether black or white text contrasts better with the background."""
    color = bg_color.lstrip('#')
    if len(color) == 3:
        color = ''.join([c*2 for c in color])

    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except (ValueError, IndexError):
        return "#000000"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"


def lighten_color(hex_color: str, factor: float = 0.3) -> str:
    """Lighten a hex color by the given factor."""
    color = hex_color.lstrip('#')
    if len(color) == 3:
        color = ''.join([c*2 for c in color])

    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
    except (ValueError, IndexError):
        return hex_color

    r = int(min(255, r + (255 - r) * factor))
    g = int(min(255, g + (255 - g) * factor))
    b = int(min(255, b + (255 - b) * factor))

    return f"#{r:02x}{g:02x}{b:02x}"


def format_time_range(event: Event) -> str:
    """Local "HH:MM" or "HH:MM - HH:MM" for an event."""
    start = to_local_datetime(event.start_time).strftime('%H:%M')
    if event.end_time is None:
        return start
    return f"{start} - {to_local_datetime(event.end_time).strftime('%H:%M')}"


def _sanitize_text(text: str) -> str:
    """Convert line breaks to spaces for single-line display."""
    return ' '.join(text.split()) if text else text


class EventWidget(QFrame):
    """
    Widget representing a single event in a skin.

    compact shows a single bold title line; the full layout adds time,
    and location lines.
    """

    # Signal emitted with the Event when the widget is clicked
    clicked = Signal(object)

    def __init__(
        self,
        event_data: Event,
        compact: bool = False,
        show_time: bool = True,
        show_location: bool = True,
        parent: QWidget = None
    ):
        super().__init__(parent)
        self.event_data = event_data
        self.compact = compact
        self.show_time = show_time
        self.show_location = show_location

        self._setup_ui()
        self._apply_style()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignTop)
        if self.compact:
            layout.setContentsMargins(4, 2, 4, 2)
            layout.setSpacing(0)
        else:
            layout.setContentsMargins(6, 4, 6, 4)
            layout.setSpacing(2)

        if self.show_time and not self.compact:
            header_layout = QHBoxLayout()
            header_layout.addWidget(QLabel(format_time_range(self.event_data)))
            header_layout.addStretch()
            layout.addLayout(header_layout)

        title_label = QLabel(_sanitize_text(self.event_data.title))
        title_label.setTextFormat(Qt.PlainText)
        title_label.setWordWrap(not self.compact)
        title_font = QFont(title_label.font())
        title_font.setBold(True)
        title_label.setFont(title_font)
        layout.addWidget(title_label)

        if self.show_location and self.event_data.location and not self.compact:
            location_label = QLabel(f"📍 {_sanitize_text(self.event_data.location)}")
            location_label.setTextFormat(Qt.PlainText)
            location_label.setWordWrap(True)
            layout.addWidget(location_label)

        self.setFrameStyle(QFrame.StyledPanel | QFrame.Plain)
        self.setCursor(Qt.PointingHandCursor)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)
        self.setToolTip(self._tooltip_text())

    def _tooltip_text(self) -> str:
        lines = [f"<b>{self.event_data.title}</b>", format_time_range(self.event_data)]
        if self.event_data.location:
            lines.append(f"📍 {self.event_data.location}")
        if self.event_data.description:
            desc = self.event_data.description
            if len(desc) > 200:
                desc = desc[:200] + "..."
            lines.append(f"<br>{desc}")
        return "<br>".join(lines)

    def _apply_style(self) -> None:
        """Apply color styling based on the event's color."""
        bg_color = self.event_data.color or _colors_config.event_default
        text_color = get_contrasting_text_color(lighten_color(bg_color, 0.4))
        self.setStyleSheet(f"""
            EventWidget {{
                background-color: {lighten_color(bg_color, 0.4)};
                border-left: 4px solid {bg_color};
                border-radius: 4px;
            }}
            EventWidget:hover {{
                background-color: {lighten_color(bg_color, 0.2)};
            }}
            QLabel {{
                color: {text_color};
                background: transparent;
                border: none;
            }}
        """)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.event_data)
        super().mousePressEvent(event)
