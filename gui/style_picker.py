"""
Style picker dialog.

Lists every calendar style grouped by category, with the active style
marked. Apply accepts the highlighted style; Cancel leaves everything as
it was.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel,
    QListWidget, QListWidgetItem, QPushButton
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from backend.styles import CalendarStyle
from .widgets.calendar_skins import get_labels_config, get_colors_config
from .widgets.style_registry import descriptors_by_category

# Item data role carrying the CalendarStyle of a selectable row
STYLE_ROLE = Qt.UserRole


class StylePickerDialog(QDialog):
    """Modal list of calendar styles."""

    def __init__(self, current_style: CalendarStyle, parent=None):
        super().__init__(parent)
        self.labels = get_labels_config()
        self.current_style = current_style

        self.setWindowTitle(self.labels.picker_title)
        self.setModal(True)
        self.setMinimumSize(320, 480)

        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(8)
        layout.setContentsMargins(8, 8, 8, 8)

        hint = QLabel(self.labels.picker_hint)
        hint.setWordWrap(True)
        hint.setStyleSheet(f"color: {get_colors_config().secondary_text};")
        layout.addWidget(hint)

        self._list = QListWidget()
        self._list.itemDoubleClicked.connect(self._on_item_double_clicked)
        layout.addWidget(self._list, 1)

        for category, descriptors in descriptors_by_category().items():
            if not descriptors:
                continue
            header = QListWidgetItem(category)
            header_font = QFont(self._list.font())
            header_font.setBold(True)
            header.setFont(header_font)
            header.setFlags(Qt.NoItemFlags)
            self._list.addItem(header)

            for descriptor in descriptors:
                text = f"    {descriptor.name}"
                if descriptor.style == self.current_style:
                    text += "  ✓"
                item = QListWidgetItem(text)
                item.setData(STYLE_ROLE, descriptor.style.value)
                self._list.addItem(item)
                if descriptor.style == self.current_style:
                    self._list.setCurrentItem(item)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self._cancel_btn = QPushButton(self.labels.button_cancel)
        self._cancel_btn.clicked.connect(self.reject)
        buttons.addWidget(self._cancel_btn)

        self._apply_btn = QPushButton(self.labels.button_apply)
        self._apply_btn.setDefault(True)
        self._apply_btn.clicked.connect(self.accept)
        buttons.addWidget(self._apply_btn)
        layout.addLayout(buttons)

    def select_style(self, style: CalendarStyle):
        """Highlight the row of style."""
        for row in range(self._list.count()):
            item = self._list.item(row)
            if item.data(STYLE_ROLE) == style.value:
                self._list.setCurrentItem(item)
                return

    def selected_style(self) -> Optional[CalendarStyle]:
        item = self._list.currentItem()
        if item is None or item.data(STYLE_ROLE) is None:
            return None
        return CalendarStyle(item.data(STYLE_ROLE))

    def _on_item_double_clicked(self, item: QListWidgetItem):
        if item.data(STYLE_ROLE) is not None:
            self.accept()
