"""
Durable key-value storage for user preferences.

Abstract base class and implementations. The JSON backend shares the
application state file and only touches its own top-level keys.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class PreferenceStorageError(Exception):
    """Raised when preferences cannot be read or written."""


class PreferenceStorage(ABC):
    """Abstract key-value preference storage."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Get the stored string for key, or None if absent."""
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store value under key."""
        pass

    @property
    def watch_path(self) -> Optional[Path]:
        """File to watch for external changes, if the backend has one."""
        return None


class MemoryPreferenceStorage(PreferenceStorage):
    """In-process storage for hosts that persist preferences themselves."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonPreferenceStorage(PreferenceStorage):
    """
    Preferences stored as top-level keys of a JSON state file.

    File structure:
    {
        "calendar_style": "grid-month",
        ...other application state...
    }
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def watch_path(self) -> Optional[Path]:
        return self.path

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PreferenceStorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PreferenceStorageError(f"Unexpected content in {self.path}")
        return data

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def write(self, key: str, value: str) -> None:
        # Refuses to write over a state file it cannot read
        data = self._load()
        data[key] = value

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PreferenceStorageError(f"Cannot write {self.path}: {e}") from e
