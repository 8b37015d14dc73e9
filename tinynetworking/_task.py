import threading
from concurrent.futures import Future
from typing import Callable, Generic, Optional, TypeVar

from ._result import Result
from ._utils._logs import logger
from .models.exceptions import RequestCancelledError

A = TypeVar("A")


class DataTask(Generic[A]):
    """Handle for an endpoint load started by :meth:`Session.load`.

    The completion handler runs exactly once. Cancelling before the load
    completes delivers a ``RequestCancelledError`` and discards whatever the
    network call produces afterwards. Cancelling a completed task does nothing.
    """

    def __init__(
        self, description: str, on_complete: Callable[[Result[A]], None]
    ) -> None:
        self.description = description
        self._on_complete = on_complete
        self._lock = threading.Lock()
        self._completed = threading.Event()
        self._future: Optional[Future] = None
        self._result: Optional[Result[A]] = None
        self._cancelled = False

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def result(self) -> Optional[Result[A]]:
        """The delivered result, or None while the load is in flight."""
        return self._result

    def cancel(self) -> bool:
        """Cancel the load.

        Returns:
            bool: True if this call cancelled the load, False if it had already
            completed or been cancelled.
        """
        with self._lock:
            if self._result is not None:
                return False
            self._cancelled = True
            self._result = Result.failure(RequestCancelledError(self.description))
            future = self._future

        if future is not None:
            future.cancel()

        logger.debug(f"Cancelled {self.description}")
        try:
            self._on_complete(self._result)
        finally:
            self._completed.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the completion handler has run.

        Returns:
            bool: False if ``timeout`` expired first.
        """
        return self._completed.wait(timeout)

    def _attach(self, future: Future) -> None:
        with self._lock:
            self._future = future
            cancelled = self._cancelled

        if cancelled:
            future.cancel()

    def _abort(self) -> bool:
        with self._lock:
            if self._result is not None:
                return False
            self._cancelled = True
            future = self._future

        if future is not None:
            future.cancel()
        return self._finish(Result.failure(RequestCancelledError(self.description)))

    def _finish(self, result: Result[A]) -> bool:
        with self._lock:
            if self._result is not None:
                logger.debug(f"Discarding late result for {self.description}")
                return False
            self._result = result

        try:
            self._on_complete(result)
        except Exception:
            logger.exception(f"Completion handler for {self.description} raised")
        finally:
            self._completed.set()
        return True

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "done" if self.done else "running"
        return f"DataTask({self.description}, {state})"
