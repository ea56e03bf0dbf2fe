"""
Infrastructure package for the SQLite Pragma Bench.

Centralizes storage concerns (database files, the SQLite store, schema and the
baseline reset). Keep this layer focused on I/O and resource management,
decoupled from strategy/orchestrator logic.
"""

from pragma_bench.infrastructure.db_factory import new_database_path, open_store
from pragma_bench.infrastructure.reset import reset_database
from pragma_bench.infrastructure.schema import records_table, table_for
from pragma_bench.infrastructure.store import SqliteStore

__all__ = [
    "SqliteStore",
    "new_database_path",
    "open_store",
    "records_table",
    "reset_database",
    "table_for",
]
