"""
Utilities package for the SQLite Pragma Bench.

Exports shared helpers for logging, profiling, and timing.
Keep this package lightweight and free of domain-specific logic.
"""

from pragma_bench.utils.clock import Clock, monotonic_clock
from pragma_bench.utils.logging import configure_logging, get_logger
from pragma_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "Clock",
    "monotonic_clock",
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
