"""Pacing between topics and step timing."""

from __future__ import annotations

import logging
import time
from typing import Callable

LOGGER = logging.getLogger(__name__)


class FixedIntervalPacer:
    """Blocks for a fixed delay every time ``wait`` is called.

    The delay is unconditional: it does not adapt to how long the previous
    topic took or whether it succeeded.
    """

    def __init__(self, delay: float = 2.0, sleep: Callable[[float], None] = time.sleep):
        self.delay = max(0.0, float(delay))
        self._sleep = sleep
        self.waits = 0
        self.total_waited = 0.0

    def wait(self) -> None:
        self.waits += 1
        self.total_waited += self.delay
        if self.delay:
            LOGGER.debug("Pacing for %.1fs", self.delay)
            self._sleep(self.delay)


class NoopPacer(FixedIntervalPacer):
    def __init__(self):
        super().__init__(delay=0.0)


class StepTimer:
    """Context manager to log step durations."""

    def __init__(self, name: str):
        self.name = name
        self.start = 0.0
        self.duration = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.duration = time.perf_counter() - self.start
        LOGGER.info("Step '%s' completed in %.3fs", self.name, self.duration)


__all__ = ["FixedIntervalPacer", "NoopPacer", "StepTimer"]
