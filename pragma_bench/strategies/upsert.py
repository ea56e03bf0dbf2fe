"""
Insert-or-replace strategies.

Upserts succeed whether or not the identifier already exists. The
with-children variants go through the store's cascading path; records declare
no children, so they measure that path's overhead alone.
"""

from __future__ import annotations

from typing import List

from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.strategies.abstract import AbstractWriteStrategy


class InsertOrReplaceStrategy(AbstractWriteStrategy):
    name: str = "insert_or_replace"
    description: str = "One INSERT OR REPLACE per record, each committed on its own."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        for record in payload:
            store.insert_or_replace(record)


class InsertOrReplaceInTransactionStrategy(AbstractWriteStrategy):
    name: str = "insert_or_replace_in_transaction"
    description: str = "One INSERT OR REPLACE per record inside a single transaction."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        with store.transaction():
            for record in payload:
                store.insert_or_replace(record)


class InsertOrReplaceAllWithChildrenStrategy(AbstractWriteStrategy):
    name: str = "insert_or_replace_all_with_children"
    description: str = "Cascading upsert of the whole batch in one call."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        store.insert_or_replace_all_with_children(payload)


class InsertOrReplaceAllWithChildrenInTransactionStrategy(AbstractWriteStrategy):
    name: str = "insert_or_replace_all_with_children_in_transaction"
    description: str = "Cascading upsert of the whole batch inside an explicit transaction."

    def _run(self, store: SqliteStore, payload: List[Record]) -> None:
        store.run_in_transaction(lambda: store.insert_or_replace_all_with_children(payload))


__all__ = [
    "InsertOrReplaceAllWithChildrenInTransactionStrategy",
    "InsertOrReplaceAllWithChildrenStrategy",
    "InsertOrReplaceInTransactionStrategy",
    "InsertOrReplaceStrategy",
]
