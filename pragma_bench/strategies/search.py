"""
Lookup strategies over the seeded population.

These are not part of the default catalog; select them explicitly to see how
pragmas affect reads. They never consume identifiers.
"""

from __future__ import annotations

from typing import List

from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.strategies.abstract import AbstractReadStrategy, ExperimentContext


class SearchInLoopStrategy(AbstractReadStrategy):
    name: str = "search_in_loop"
    description: str = "Primary-key lookup per random id."

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        for record_id in payload:
            store.find(Record, record_id)


class SearchInLoopInTransactionStrategy(SearchInLoopStrategy):
    name: str = "search_in_loop_in_transaction"
    description: str = "Primary-key lookup per random id inside one transaction."

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        with store.transaction():
            super()._run(store, payload)


class SearchWithQueryStrategy(AbstractReadStrategy):
    """Sequential ids from 0, one parameterised SELECT each."""

    name: str = "search_with_query"
    description: str = "Parameterised SELECT per sequential id."

    def _prepare(self, context: ExperimentContext, count: int) -> List[int]:
        return list(range(count))

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        for record_id in payload:
            store.query_by_id(Record, record_id)


class SearchWithQueryInTransactionStrategy(SearchWithQueryStrategy):
    name: str = "search_with_query_in_transaction"
    description: str = "Parameterised SELECT per sequential id inside one transaction."

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        with store.transaction():
            super()._run(store, payload)


class SearchWithTableStrategy(AbstractReadStrategy):
    name: str = "search_with_table"
    description: str = "Single IN (...) query over random ids."

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        store.select_where_ids(Record, payload)


class SearchWithTableInTransactionStrategy(SearchWithTableStrategy):
    name: str = "search_with_table_in_transaction"
    description: str = "Single IN (...) query over random ids inside one transaction."

    def _run(self, store: SqliteStore, payload: List[int]) -> None:
        store.run_in_transaction(lambda: store.select_where_ids(Record, payload))


__all__ = [
    "SearchInLoopInTransactionStrategy",
    "SearchInLoopStrategy",
    "SearchWithQueryInTransactionStrategy",
    "SearchWithQueryStrategy",
    "SearchWithTableInTransactionStrategy",
    "SearchWithTableStrategy",
]
