"""
Strategies package for the SQLite Pragma Bench.

This module re-exports the abstract interfaces and the concrete strategy classes
so downstream code can import from `pragma_bench.strategies` directly.
"""

from pragma_bench.strategies.abstract import (
    AbstractBenchmarkStrategy,
    AbstractReadStrategy,
    AbstractWriteStrategy,
    BenchmarkStrategy,
    ExperimentContext,
    StrategyResult,
)
from pragma_bench.strategies.insert import (
    InsertAllInTransactionStrategy,
    InsertAllStrategy,
    InsertInTransactionStrategy,
    InsertStrategy,
)
from pragma_bench.strategies.search import (
    SearchInLoopInTransactionStrategy,
    SearchInLoopStrategy,
    SearchWithQueryInTransactionStrategy,
    SearchWithQueryStrategy,
    SearchWithTableInTransactionStrategy,
    SearchWithTableStrategy,
)
from pragma_bench.strategies.upsert import (
    InsertOrReplaceAllWithChildrenInTransactionStrategy,
    InsertOrReplaceAllWithChildrenStrategy,
    InsertOrReplaceInTransactionStrategy,
    InsertOrReplaceStrategy,
)

__all__ = [
    # Abstracts
    "AbstractBenchmarkStrategy",
    "AbstractReadStrategy",
    "AbstractWriteStrategy",
    "BenchmarkStrategy",
    "ExperimentContext",
    "StrategyResult",
    # Write strategies
    "InsertAllInTransactionStrategy",
    "InsertAllStrategy",
    "InsertInTransactionStrategy",
    "InsertOrReplaceAllWithChildrenInTransactionStrategy",
    "InsertOrReplaceAllWithChildrenStrategy",
    "InsertOrReplaceInTransactionStrategy",
    "InsertOrReplaceStrategy",
    "InsertStrategy",
    # Read strategies
    "SearchInLoopInTransactionStrategy",
    "SearchInLoopStrategy",
    "SearchWithQueryInTransactionStrategy",
    "SearchWithQueryStrategy",
    "SearchWithTableInTransactionStrategy",
    "SearchWithTableStrategy",
]
