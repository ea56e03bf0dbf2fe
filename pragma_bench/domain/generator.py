"""
Deterministic record generation.

Records are built in memory before a strategy starts its timer or before the
resetter seeds a table, so construction cost never shows up in a measurement.
"""

from __future__ import annotations

from typing import Iterator, List

from pragma_bench.domain.models import Record


def iter_records(count: int, start_id: int = 0) -> Iterator[Record]:
    """
    Yield `count` records with consecutive ids starting at `start_id`.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if start_id < 0:
        raise ValueError(f"start_id must be >= 0, got {start_id}")
    for record_id in range(start_id, start_id + count):
        yield Record(id=record_id, name=str(record_id))


def generate_records(count: int, start_id: int = 0) -> List[Record]:
    """Materialize `iter_records` into a list."""
    return list(iter_records(count, start_id))


__all__ = ["generate_records", "iter_records"]
