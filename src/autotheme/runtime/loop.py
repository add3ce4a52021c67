"""Serial execution context for UI-visible updates.

Intensity, predictions and theme changes are observed by the menu and
other UI code, so they are all delivered on one thread in submission
order. Prediction and sleep work stays on the scheduler thread.
"""
from concurrent.futures import Future
from queue import Empty, Queue
from threading import Event, Thread, current_thread
from typing import Any, Callable, Optional
import logging

logger = logging.getLogger(__name__)


class UIContext:
    """Single worker thread draining a queue of callbacks.

    While the worker is not running, calls execute inline on the caller's
    thread, which keeps the same ordering guarantees for single-threaded
    use such as tests and one-shot commands.
    """

    def __init__(self, name: str = "autotheme-ui"):
        self.name = name
        self._queue: "Queue[Optional[tuple]]" = Queue()
        self._running = False
        self._stop_event = Event()
        self._thread: Optional[Thread] = None

    def start(self) -> None:
        """Start the worker thread."""
        if self._running:
            logger.warning("UI context already running")
            return

        self._running = True
        self._stop_event.clear()
        self._thread = Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info("UI context started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the worker after the queued callbacks have run.

        Args:
            timeout: Maximum time to wait for clean shutdown
        """
        if not self._running:
            return

        logger.info("Stopping UI context")
        self._stop_event.set()
        self._queue.put(None)

        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

        self._running = False
        logger.info("UI context stopped")

    def is_running(self) -> bool:
        """Check if the worker thread is running."""
        return self._running

    def on_ui_thread(self) -> bool:
        """True only on the running worker thread."""
        return self._running and current_thread() is self._thread

    def in_context(self) -> bool:
        """True when called from the worker thread (or inline mode)."""
        return not self._running or current_thread() is self._thread

    def call(self, callback: Callable, *args, wait: bool = False, **kwargs) -> Any:
        """Run ``callback`` on the UI thread.

        Args:
            callback: Function to call
            wait: If True, block until it ran and return its result
                (exceptions are re-raised in the caller)

        Returns:
            The callback's result when waited on or run inline, else a Future
        """
        if self.in_context():
            return callback(*args, **kwargs)

        future: Future = Future()
        self._queue.put((future, callback, args, kwargs))
        if wait:
            return future.result()
        return future

    def _run_loop(self) -> None:
        """Main loop (runs in background thread)."""
        while True:
            try:
                item = self._queue.get(timeout=0.5)
            except Empty:
                if self._stop_event.is_set():
                    break
                continue

            if item is None:
                break

            future, callback, args, kwargs = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(callback(*args, **kwargs))
            except Exception as e:
                logger.error(f"Error executing UI callback {getattr(callback, '__name__', callback)}: {e}")
                future.set_exception(e)

        # Drain whatever was queued behind the sentinel so no waiter hangs.
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                break
            if item is None:
                continue
            future, callback, args, kwargs = item
            if future.set_running_or_notify_cancel():
                try:
                    future.set_result(callback(*args, **kwargs))
                except Exception as e:
                    future.set_exception(e)
