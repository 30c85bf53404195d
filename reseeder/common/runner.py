"""
Background runner for fixed-interval tasks.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta  # noqa: TC003
from typing import Callable


class PeriodicRunner:
    """Runs a callable on a daemon thread until stopped.

    The stop signal is a threading.Event, so ``stop`` wakes the thread
    immediately instead of waiting out the current interval.
    """

    def __init__(
        self,
        name: str,
        interval: timedelta,
        task: Callable[[], None],
        run_immediately: bool = False,  # noqa: FBT001, FBT002
    ):
        self.name = name
        self.interval = interval
        self.task = task
        self.run_immediately = run_immediately
        self.logger = logging.getLogger(__name__)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self) -> None:
        """Run the loop in the calling thread until ``stop`` is called."""
        if self.run_immediately:
            self._run_once()
        while not self._stop_event.wait(self.interval.total_seconds()):
            self._run_once()

    def _run_once(self) -> None:
        try:
            self.task()
        except Exception:
            self.logger.exception("%s task failed", self.name)

    def start(self) -> None:
        """Start the loop in a separate thread."""
        if self.running:
            self.logger.warning("%s is already running", self.name)
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        self.logger.debug("%s started in background thread", self.name)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the loop to exit and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None
        self.logger.debug("%s stopped", self.name)
