"""
Style Preference Store.

Owns the single process-wide setting of the active calendar style. The
value is loaded once from durable storage, read from memory afterwards,
and written back in the background. Interested widgets subscribe to the
style_changed signal.

When the storage can also be changed outside this process (the JSON
state file), start_watching() adds a file watcher and a polling fallback
that reconcile the in-memory value with what is on disk.
"""

from datetime import datetime
from typing import Callable, Optional
import sys

from PySide6.QtCore import QObject, QTimer, Signal, QFileSystemWatcher

from .preference_storage import PreferenceStorage, PreferenceStorageError
from .storage_worker import StorageWorker
from .styles import CalendarStyle, DEFAULT_STYLE, coerce_style, is_valid_style


STYLE_PREFERENCE_KEY = "calendar_style"
DEFAULT_POLL_INTERVAL_MS = 2000


def _debug_print(msg: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] PREFS: {msg}", file=sys.stderr)


class StylePreferenceStore(QObject):
    """
    Process-wide holder of the active calendar style.

    Only this object mutates the preference; everything else reads the
    style property or listens to style_changed.
    """

    # Emitted with the new style id whenever the in-memory value changes
    style_changed = Signal(str)

    def __init__(
        self,
        storage: PreferenceStorage,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        error_reporter: Optional[Callable[[str], None]] = None,
        parent=None
    ):
        super().__init__(parent)
        self._storage = storage
        self._poll_interval_ms = poll_interval_ms
        self._report = error_reporter or _debug_print
        self._style: CalendarStyle = DEFAULT_STYLE
        self._loaded = False
        # Last value known to be in storage, read or written by us
        self._last_stored: Optional[str] = None

        self._worker = StorageWorker(error_handler=self._on_write_failed, parent=self)

        self._poll_timer: Optional[QTimer] = None
        self._watcher: Optional[QFileSystemWatcher] = None

    # ==================== Lifecycle ====================

    def load(self) -> CalendarStyle:
        """
        Load the persisted style into memory.

        Missing, empty or unknown values are replaced by the default, which
        is then persisted. If storage cannot be read at all, the default is
        used for this session without writing.
        """
        self._loaded = True
        try:
            stored = self._storage.read(STYLE_PREFERENCE_KEY)
        except PreferenceStorageError as e:
            self._report(f"Cannot load calendar style: {e}")
            self._style = DEFAULT_STYLE
            return self._style

        self._last_stored = stored
        if stored and is_valid_style(stored):
            self._style = CalendarStyle(stored)
        else:
            if stored:
                _debug_print(f"Ignoring stored calendar style {stored!r}")
            self._style = DEFAULT_STYLE
            self._persist(self._style)
        return self._style

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def style(self) -> CalendarStyle:
        """The active style (loads from storage on first access)."""
        if not self._loaded:
            self.load()
        return self._style

    def set_style(self, value) -> CalendarStyle:
        """
        Make value the active style.

        Unknown ids become the default style. The write happens in the
        background; style_changed is emitted only if the value changed.
        """
        if not self._loaded:
            self.load()
        style = coerce_style(value)
        changed = style != self._style
        self._style = style
        self._persist(style)
        if changed:
            self.style_changed.emit(style.value)
        return style

    # ==================== Persistence ====================

    def _persist(self, style: CalendarStyle) -> None:
        self._worker.submit(
            f"write {STYLE_PREFERENCE_KEY}={style.value}", self._write, style.value
        )

    def _write(self, value: str) -> None:
        self._storage.write(STYLE_PREFERENCE_KEY, value)
        self._last_stored = value

    def _on_write_failed(self, operation_id: str, error: Exception) -> None:
        # Called from the storage thread; memory stays authoritative.
        self._report(f"Cannot save calendar style ({operation_id}): {error}")

    def wait_for_writes(self, timeout: Optional[float] = None) -> bool:
        """Block until queued writes have been applied."""
        return self._worker.wait(timeout)

    # ==================== External changes ====================

    def reconcile(self) -> bool:
        """
        Adopt a style written to storage by someone else.

        Skipped while our own writes are in flight, so a value on disk that
        is about to be overwritten never replaces a newer in-memory one.
        A value equal to the last one we read or wrote is not an external
        change; after a failed write the old value on disk stays ignored.

        Returns True if the in-memory style changed.
        """
        if not self._loaded:
            self.load()
            return False
        if self._worker.has_pending():
            return False
        try:
            stored = self._storage.read(STYLE_PREFERENCE_KEY)
        except PreferenceStorageError as e:
            self._report(f"Cannot check calendar style: {e}")
            return False
        if stored == self._last_stored:
            return False
        self._last_stored = stored
        if not stored or not is_valid_style(stored):
            return False

        style = CalendarStyle(stored)
        if style == self._style:
            return False
        _debug_print(f"Calendar style changed externally: {self._style.value} -> {style.value}")
        self._style = style
        self.style_changed.emit(style.value)
        return True

    def start_watching(self) -> None:
        """Start the file watcher (if storage is file based) and the poll timer."""
        path = self._storage.watch_path
        if path is not None and self._watcher is None:
            self._watcher = QFileSystemWatcher(self)
            if path.exists():
                self._watcher.addPath(str(path))
            self._watcher.fileChanged.connect(self._on_file_changed)

        if self._poll_interval_ms > 0 and self._poll_timer is None:
            self._poll_timer = QTimer(self)
            self._poll_timer.timeout.connect(self._on_poll)
            self._poll_timer.start(self._poll_interval_ms)

    def stop_watching(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.stop()
            self._poll_timer.deleteLater()
            self._poll_timer = None
        if self._watcher is not None:
            self._watcher.deleteLater()
            self._watcher = None

    @property
    def is_watching(self) -> bool:
        return self._poll_timer is not None or self._watcher is not None

    def _rewatch(self) -> None:
        # Atomic replaces drop the path from the watcher, and the state
        # file may only appear after the first write.
        path = self._storage.watch_path
        if self._watcher is None or path is None or not path.exists():
            return
        if str(path) not in self._watcher.files():
            self._watcher.addPath(str(path))

    def _on_file_changed(self, path: str) -> None:
        self._rewatch()
        self.reconcile()

    def _on_poll(self) -> None:
        self._rewatch()
        self.reconcile()

    def shutdown(self) -> None:
        """Stop watching and flush pending writes."""
        self.stop_watching()
        self._worker.shutdown(wait=True)
