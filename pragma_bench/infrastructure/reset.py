"""
Baseline reset for a configuration's database.

Dropping and recreating the table, then seeding it with a fixed population,
gives every configuration the same size-controlled starting point.
"""

from __future__ import annotations

from pragma_bench.domain.generator import generate_records
from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.utils.logging import get_logger

log = get_logger(__name__)


def reset_database(store: SqliteStore, size: int) -> int:
    """
    Recreate the records table and seed it with ids `0..size-1`.

    The seed is written with a single all-or-nothing bulk insert. Returns the
    next free identifier (`size`), which callers use to allocate ids for the
    strategy runs that follow. Errors propagate unchanged.
    """
    if size < 0:
        raise ValueError(f"size must be >= 0, got {size}")

    store.drop_table(Record)
    store.create_table(Record)
    records = generate_records(size, start_id=0)
    store.insert_all(records, run_in_transaction=True)
    log.debug("Database reset", extra={"path": str(store.path), "rows": size})
    return size


__all__ = ["reset_database"]
