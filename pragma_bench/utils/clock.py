"""
Clock abstraction used to time strategy runs.

Strategies read time through an injected zero-argument callable returning
seconds, so tests can substitute a scripted clock and assert exact durations.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic_clock() -> float:
    """Default clock: high-resolution monotonic seconds."""
    return time.perf_counter()


__all__ = ["Clock", "monotonic_clock"]
