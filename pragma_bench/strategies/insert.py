"""
Plain insert strategies.

Both single-row and bulk variants come with and without an explicit
transaction, which is usually where pragma choices make the biggest
difference: outside a transaction every row pays for its own commit.
"""

from __future__ import annotations

from typing import List

from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.strategies.abstract import AbstractWriteStrategy


class InsertStrategy(AbstractWriteStrategy):
    name: str = "insert"
    description: str = "One INSERT per record, each committed on its own."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        for record in payload:
            store.insert(record)


class InsertInTransactionStrategy(AbstractWriteStrategy):
    name: str = "insert_in_transaction"
    description: str = "One INSERT per record inside a single transaction."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        with store.transaction():
            for record in payload:
                store.insert(record)


class InsertAllStrategy(AbstractWriteStrategy):
    """
    Bulk insert call; `run_in_transaction` is passed straight to the store.
    """

    name: str = "insert_all"
    description: str = "Single bulk insert call without a transaction."
    run_in_transaction: bool = False

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        store.insert_all(payload, run_in_transaction=self.run_in_transaction)


class InsertAllInTransactionStrategy(InsertAllStrategy):
    name: str = "insert_all_in_transaction"
    description: str = "Single bulk insert call wrapped in a transaction."
    run_in_transaction: bool = True


__all__ = [
    "InsertAllInTransactionStrategy",
    "InsertAllStrategy",
    "InsertInTransactionStrategy",
    "InsertStrategy",
]
