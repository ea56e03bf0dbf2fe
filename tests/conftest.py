"""
Pytest configuration for the SQLite Pragma Bench.

Provides fixtures for:
- Real SQLite stores on temporary files
- A fake in-memory store for driver and strategy tests
- Scripted clocks so durations are exact
- Settings override for small, fast runs
"""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Callable, Dict, Generator, Iterable, Iterator, List, Optional, Sequence

import pytest

from pragma_bench.config import Settings
from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.reset import reset_database
from pragma_bench.infrastructure.store import SqliteStore

SMALL_DATABASE_SIZE = 10
SMALL_OPERATION_COUNT = 5


class ScriptedClock:
    """
    Clock returning pre-recorded ticks in order.

    `observers` are called on every tick, which lets tests check what had
    already happened when the clock was read.
    """

    def __init__(self, ticks: Iterable[float]) -> None:
        self._ticks: List[float] = list(ticks)
        self.calls = 0
        self.observers: List[Callable[[], None]] = []

    @classmethod
    def for_durations(cls, durations: Iterable[float]) -> "ScriptedClock":
        """Each duration becomes a (0.0, duration) start/end pair."""
        ticks: List[float] = []
        for duration in durations:
            ticks.extend((0.0, duration))
        return cls(ticks)

    def __call__(self) -> float:
        for observer in self.observers:
            observer()
        value = self._ticks[self.calls]
        self.calls += 1
        return value


class FakeStore:
    """
    In-memory stand-in for SqliteStore.

    Enforces primary-key uniqueness on `insert`, records applied pragmas and
    transaction nesting, and can be told to fail pragmas or the reset.
    """

    def __init__(
        self,
        path: Path | str,
        fail_pragmas: Sequence[str] = (),
        fail_reset: bool = False,
    ) -> None:
        self.path = Path(path)
        self.fail_pragmas = set(fail_pragmas)
        self.fail_reset = fail_reset
        self.applied_pragmas: List[str] = []
        self.rows: Dict[int, Record] = {}
        self.resets = 0
        self.transactions = 0
        self.closed = False
        self._depth = 0

    def execute_scalar(self, sql: str) -> Optional[str]:
        if sql in self.fail_pragmas:
            raise RuntimeError(f"near \"{sql}\": syntax error")
        self.applied_pragmas.append(sql)
        return "ok"

    def drop_table(self, model: type) -> None:
        self.rows.clear()

    def create_table(self, model: type) -> None:
        if self.fail_reset:
            raise RuntimeError("disk I/O error")
        self.resets += 1

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        self._depth += 1
        if self._depth == 1:
            self.transactions += 1
        try:
            yield
        finally:
            self._depth -= 1

    def run_in_transaction(self, action: Callable[[], object]) -> object:
        with self.transaction():
            return action()

    def insert(self, record: Record) -> None:
        if record.id in self.rows:
            raise RuntimeError(f"UNIQUE constraint failed: records.id ({record.id})")
        self.rows[record.id] = record

    def insert_or_replace(self, record: Record) -> None:
        self.rows[record.id] = record

    def insert_all(self, records: Sequence[Record], run_in_transaction: bool = True) -> int:
        if run_in_transaction:
            with self.transaction():
                for record in records:
                    self.insert(record)
        else:
            for record in records:
                self.insert(record)
        return len(records)

    def insert_or_replace_all_with_children(self, records: Sequence[Record], recursive: bool = False) -> int:
        with self.transaction():
            for record in records:
                self.insert_or_replace(record)
        return len(records)

    def find(self, model: type, record_id: int) -> Optional[Record]:
        return self.rows.get(record_id)

    def query_by_id(self, model: type, record_id: int) -> List[Record]:
        return [self.rows[record_id]] if record_id in self.rows else []

    def select_where_ids(self, model: type, ids: Sequence[int]) -> List[Record]:
        return [self.rows[i] for i in ids if i in self.rows]

    def close(self) -> None:
        self.closed = True


class FakeStoreFactory:
    """Store factory for the driver that remembers every store it opened."""

    def __init__(self, **store_kwargs) -> None:
        self.store_kwargs = store_kwargs
        self.stores: List[FakeStore] = []

    def __call__(self, path: Path) -> FakeStore:
        store = FakeStore(path, **self.store_kwargs)
        self.stores.append(store)
        return store


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings with small sizes and a temporary data directory.
    """
    return Settings(
        benchmark_database_size=SMALL_DATABASE_SIZE,
        benchmark_operation_count=SMALL_OPERATION_COUNT,
        benchmark_pragmas=["PRAGMA synchronous = OFF", "PRAGMA temp_store = MEMORY"],
        benchmark_data_dir=str(tmp_path / "data"),
        benchmark_results_dir=str(tmp_path / "results"),
        log_level="DEBUG",
    )


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Generator[SqliteStore, None, None]:
    """
    A real store on a fresh temporary database file.
    """
    store = SqliteStore(tmp_path / "bench.db")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def seeded_store(sqlite_store: SqliteStore) -> SqliteStore:
    """
    Real store reset to SMALL_DATABASE_SIZE baseline rows.
    """
    reset_database(sqlite_store, SMALL_DATABASE_SIZE)
    return sqlite_store


@pytest.fixture
def fake_store(tmp_path: Path) -> FakeStore:
    return FakeStore(tmp_path / "fake.db")
