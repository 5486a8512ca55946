"""
detection_scheduler.py
-----------------------
Cooperative debounce for detection runs.

Data changes arrive in bursts (imports, edits). The scheduler keeps at most
one pending request; each change cancels it and schedules a new one
settle_seconds later. The host loop calls run_pending() whenever it gets
control. No threads, no timers of its own.

    scheduler = DetectionScheduler(lambda: pipeline.run(txns))
    scheduler.notify_change()
    ...
    scheduler.run_pending()   # runs only once the settle period has passed
"""

import logging
import time
from typing import Any, Callable, Optional

from config.config_loader import get_scheduler_config

logger = logging.getLogger(__name__)


class DetectionScheduler:
    """
    Single-slot debounce scheduler.

    Args:
        callback: Zero-argument callable that performs detection.
        settle_seconds: Delay after the last change. Defaults to config.
        clock: Monotonic time source in seconds. Defaults to time.monotonic.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        settle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.callback = callback
        self.settle_seconds = (
            settle_seconds if settle_seconds is not None else get_scheduler_config()["settle_seconds"]
        )
        self.clock = clock
        self._due_at: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._due_at is not None

    def notify_change(self, now: float | None = None) -> None:
        """Cancel any pending request and schedule a new one."""
        now = self.clock() if now is None else now
        self._due_at = now + self.settle_seconds

    def cancel(self) -> None:
        self._due_at = None

    def run_pending(self, now: float | None = None) -> Any:
        """
        Run the callback if a request is pending and its settle period has
        elapsed. Returns the callback's result, or None when nothing ran.
        """
        if self._due_at is None:
            return None
        now = self.clock() if now is None else now
        if now < self._due_at:
            return None

        self._due_at = None
        logger.debug("Settle period elapsed, running detection.")
        return self.callback()
