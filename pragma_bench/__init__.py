"""
SQLite Pragma Bench - find the fastest pragma combination per write strategy.

Runs a catalog of data-access strategies against a fresh SQLite file for every
subset of a base list of pragmas, including:

- Single-row inserts, with and without a transaction
- Bulk inserts, with and without a transaction
- Insert-or-replace, single-row and cascading batch variants
- Optional lookup strategies over the seeded population

and reports, per strategy, the lowest duration and the pragma sets that
achieved it.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from pragma_bench.aggregator import BestResult, BestResults, TiePolicy
from pragma_bench.config import Settings, get_settings
from pragma_bench.orchestrator import (
    RunConfig,
    available_strategies,
    default_strategies,
    run_experiments,
)
from pragma_bench.pragmas import iter_pragma_sets
from pragma_bench.strategies.abstract import (
    AbstractBenchmarkStrategy,
    BenchmarkStrategy,
    ExperimentContext,
    StrategyResult,
)
from pragma_bench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "RunConfig",
    "available_strategies",
    "default_strategies",
    "run_experiments",
    "iter_pragma_sets",
    # Aggregation
    "BestResult",
    "BestResults",
    "TiePolicy",
    # Strategy abstractions
    "AbstractBenchmarkStrategy",
    "BenchmarkStrategy",
    "ExperimentContext",
    "StrategyResult",
    # Logging
    "configure_logging",
    "get_logger",
]
