"""
A repeating timer running on a daemon thread.

The thread is a passive observer: being a daemon it never keeps the
interpreter alive, and it can be cancelled from any thread, including from
inside its own callback.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """
    Calls ``callback`` every ``interval`` seconds until cancelled.

    Each wait starts after the previous callback returned, so a busy host
    makes ticks arrive late rather than bunching them up. Exceptions raised
    by the callback are logged and do not stop the timer.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "RepeatingTimer"):
        """
        Args:
            interval: Seconds between ticks
            callback: Zero-argument callable invoked on each tick
            name: Thread name, useful when inspecting live threads
        """
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        if self._thread is not None:
            logger.warning(f"Timer {self.name} already started")
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Timer {self.name} started with interval {self.interval}s")

    def cancel(self) -> None:
        """Prevent any further tick. Returns immediately."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the timer thread to exit; a no-op from the timer thread itself."""
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=timeout)
        if thread.is_alive():
            logger.warning(f"Timer {self.name} did not stop within {timeout}s")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Error in timer {self.name} callback: {e}", exc_info=True)
        logger.debug(f"Timer {self.name} finished")
