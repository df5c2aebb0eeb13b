"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from PySide6.QtWidgets import QApplication  # noqa: E402

from backend.timezone_utils import set_timezone, get_timezone_name  # noqa: E402
from backend.preference_storage import MemoryPreferenceStorage  # noqa: E402
from backend.style_preferences import StylePreferenceStore  # noqa: E402
from gui.widgets.calendar_skins import set_first_day_of_week  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for the whole test session."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def local_timezone():
    """Pin the local timezone so day boundaries are deterministic."""
    previous = get_timezone_name()
    set_timezone("Europe/Amsterdam")
    set_first_day_of_week(0)
    yield "Europe/Amsterdam"
    set_timezone(previous)


@pytest.fixture
def memory_storage():
    return MemoryPreferenceStorage()


@pytest.fixture
def make_store(qapp):
    """Factory for stores that are shut down after the test."""
    stores = []

    def factory(storage, **kwargs):
        kwargs.setdefault("poll_interval_ms", 0)
        store = StylePreferenceStore(storage, **kwargs)
        stores.append(store)
        return store

    yield factory
    for store in stores:
        store.shutdown()


@pytest.fixture
def sample_events():
    """Raw event records in the host's format."""
    return [
        {
            "id": "school-run",
            "title": "School run",
            "start_time": "2024-02-14T08:00:00+01:00",
            "end_time": "2024-02-14T08:30:00+01:00",
            "category": "family",
        },
        {
            "id": "dentist",
            "title": "Dentist",
            "start_time": "2024-02-14T07:15:00+01:00",
            "location": "Main Street 1",
            "color": "#ff0000",
        },
        {
            "id": "football",
            "title": "Football",
            "start_ts": 1708185600,  # 2024-02-17T16:00:00Z
            "end_ts": 1708192800,
            "type": "sport",
        },
    ]
