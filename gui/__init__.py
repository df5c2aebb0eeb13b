"""
Family Calendar GUI Module

PySide6-based graphical interface for the calendar application.
"""

from .main_window import MainWindow
from .style_picker import StylePickerDialog

__all__ = ['MainWindow', 'StylePickerDialog']
