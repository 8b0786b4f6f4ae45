"""Lightweight timing instrumentation.

Only the label and the elapsed time are logged, never the data being
processed, so the helpers are safe to wrap around code that handles private
messages.
"""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, TypeVar

from ..logging import get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")


def measure_sync(label: str, fn: Callable[[], T]) -> T:
    """Call ``fn`` and log how long it took at DEBUG level."""
    if not LOGGER.isEnabledFor(logging.DEBUG):
        return fn()
    start = time.perf_counter()
    try:
        result = fn()
    except Exception:
        LOGGER.debug("%s (failed): %.2fms", label, (time.perf_counter() - start) * 1000)
        raise
    LOGGER.debug("%s: %.2fms", label, (time.perf_counter() - start) * 1000)
    return result


async def measure_async(label: str, fn: Callable[[], Awaitable[T]]) -> T:
    """Await ``fn()`` and log how long it took at DEBUG level."""
    if not LOGGER.isEnabledFor(logging.DEBUG):
        return await fn()
    start = time.perf_counter()
    try:
        result = await fn()
    except Exception:
        LOGGER.debug("%s (failed): %.2fms", label, (time.perf_counter() - start) * 1000)
        raise
    LOGGER.debug("%s: %.2fms", label, (time.perf_counter() - start) * 1000)
    return result


class PerfTimer:
    """Stopwatch that logs laps and the final duration."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.start = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start) * 1000

    def lap(self, sublabel: str) -> float:
        duration = self.elapsed_ms()
        LOGGER.debug("%s - %s: %.2fms", self.label, sublabel, duration)
        return duration

    def end(self) -> float:
        duration = self.elapsed_ms()
        LOGGER.debug("%s: %.2fms", self.label, duration)
        return duration
