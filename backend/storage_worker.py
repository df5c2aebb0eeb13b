"""
Storage Worker - runs blocking storage writes in a background thread.

Uses a single-thread ThreadPoolExecutor so writes are applied in the order
they were submitted and the UI thread never waits on disk I/O.
"""

from concurrent.futures import ThreadPoolExecutor, Future, wait
from typing import Callable, Optional
import threading
import traceback
import sys

from PySide6.QtCore import QObject, Signal


class StorageWorker(QObject):
    """
    Runs storage operations in a background thread.

    Failures are passed to error_handler (from the worker thread) and
    announced through operation_error. An operation counts as pending
    until its result or error has been handled.
    """

    # Signal emitted when an operation completes successfully
    # Args: (operation_id: str, result: object)
    operation_finished = Signal(str, object)

    # Signal emitted when an operation fails
    # Args: (operation_id: str, error_message: str)
    operation_error = Signal(str, str)

    def __init__(self, error_handler: Optional[Callable[[str, Exception], None]] = None, parent=None):
        super().__init__(parent)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="storage")
        self._pending: dict[int, Future] = {}
        self._lock = threading.Lock()
        self._next_id = 0
        self._error_handler = error_handler

    def submit(self, operation_id: str, func: Callable, *args, **kwargs) -> Future:
        """
        Submit a blocking operation to run in the background thread.

        Args:
            operation_id: Label for this operation (used in signals and logs)
            func: The blocking function to run
            *args, **kwargs: Arguments to pass to func
        """
        with self._lock:
            ticket = self._next_id
            self._next_id += 1
            future = self._executor.submit(self._run, ticket, operation_id, func, args, kwargs)
            self._pending[ticket] = future
        return future

    def _run(self, ticket: int, operation_id: str, func: Callable, args: tuple, kwargs: dict):
        """Run one operation on the worker thread and report its outcome."""
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._on_error(operation_id, e)
            return None
        finally:
            with self._lock:
                self._pending.pop(ticket, None)
        self.operation_finished.emit(operation_id, result)
        return result

    def _on_error(self, operation_id: str, error: Exception) -> None:
        error_msg = f"{type(error).__name__}: {error}"
        if self._error_handler is not None:
            self._error_handler(operation_id, error)
        else:
            print(f"DEBUG StorageWorker: Operation '{operation_id}' failed: {error_msg}", file=sys.stderr)
            traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)
        self.operation_error.emit(operation_id, error_msg)

    def has_pending(self) -> bool:
        """Whether any operation is queued or running."""
        with self._lock:
            return bool(self._pending)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until all submitted operations have finished.

        Returns True if everything finished, False on timeout.
        """
        with self._lock:
            futures = list(self._pending.values())
        _done, not_done = wait(futures, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the executor, optionally waiting for pending operations."""
        self._executor.shutdown(wait=wait)
