"""
SQLite store used by the benchmark strategies.

`SqliteStore` holds one SQLAlchemy connection to one database file for its
whole lifetime, so pragmas applied at setup stay in effect for every strategy
run against it. Writes outside `transaction()` are committed one statement at
a time; inside it they share a single commit.
"""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import Table, create_engine, func, insert, select
from sqlalchemy.engine import Connection, Engine

from pragma_bench.infrastructure.schema import table_for
from pragma_bench.utils.logging import get_logger

log = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")


def _group_rows(records: Iterable[BaseModel]) -> Dict[Table, List[Dict[str, Any]]]:
    """Group records by target table, keeping first-seen table order."""
    grouped: Dict[Table, List[Dict[str, Any]]] = {}
    for record in records:
        grouped.setdefault(table_for(type(record)), []).append(record.model_dump())
    return grouped


class SqliteStore:
    """
    Storage engine facade over a single SQLite database file.

    Parameters
    ----------
    path : Path | str
        Database file. Created on first connect.
    engine : Engine, optional
        Pre-built engine (tests); defaults to `sqlite:///<path>`.
    """

    def __init__(self, path: Path | str, engine: Optional[Engine] = None) -> None:
        self.path = Path(path)
        self._engine = engine or create_engine(f"sqlite:///{self.path}")
        self._connection: Optional[Connection] = self._engine.connect()
        self._transaction_depth = 0

    # ------------------------------------------------------------------ lifecycle

    @property
    def closed(self) -> bool:
        return self._connection is None

    @property
    def in_transaction(self) -> bool:
        return self._transaction_depth > 0

    def _conn(self) -> Connection:
        if self._connection is None:
            raise RuntimeError(f"Store for {self.path} is closed")
        return self._connection

    def close(self) -> None:
        """Release the connection and dispose of the engine. Idempotent."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None
            self._engine.dispose()

    def __enter__(self) -> "SqliteStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------ transactions

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run the enclosed block atomically.

        Nested use joins the outermost transaction; only the outermost block
        commits or rolls back.
        """
        conn = self._conn()
        if self._transaction_depth:
            self._transaction_depth += 1
            try:
                yield
            finally:
                self._transaction_depth -= 1
            return

        self._transaction_depth = 1
        try:
            yield
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()
        finally:
            self._transaction_depth = 0

    def run_in_transaction(self, action: Callable[[], T]) -> T:
        """Execute `action` inside `transaction()` and return its result."""
        with self.transaction():
            return action()

    def _write(self, statement: Any, parameters: Any = None) -> None:
        conn = self._conn()
        try:
            conn.execute(statement, parameters)
        except Exception:
            if not self._transaction_depth:
                conn.rollback()
            raise
        self._commit_outside_transaction()

    def _commit_outside_transaction(self) -> None:
        if not self._transaction_depth:
            self._conn().commit()

    def _read(self, statement: Any) -> List[Any]:
        conn = self._conn()
        try:
            rows = conn.execute(statement).all()
        finally:
            self._commit_outside_transaction()
        return rows

    # ------------------------------------------------------------------ configuration

    def execute_scalar(self, sql: str) -> Optional[str]:
        """
        Execute a raw statement (typically a PRAGMA) and return the first
        column of the first row as a string, or None when nothing is returned.
        """
        conn = self._conn()
        try:
            result = conn.exec_driver_sql(sql)
            # Setter pragmas such as `synchronous = OFF` return no rows.
            value = result.scalar() if result.returns_rows else None
        except Exception:
            if not self._transaction_depth:
                conn.rollback()
            raise
        self._commit_outside_transaction()
        return None if value is None else str(value)

    # ------------------------------------------------------------------ schema

    def drop_table(self, model: Type[BaseModel]) -> None:
        conn = self._conn()
        table_for(model).drop(conn, checkfirst=True)
        self._commit_outside_transaction()

    def create_table(self, model: Type[BaseModel]) -> None:
        conn = self._conn()
        table_for(model).create(conn, checkfirst=True)
        self._commit_outside_transaction()

    # ------------------------------------------------------------------ writes

    def insert(self, record: BaseModel) -> None:
        """Insert one record; fails on any uniqueness violation."""
        self._write(insert(table_for(type(record))), record.model_dump())

    def insert_or_replace(self, record: BaseModel) -> None:
        """Insert one record, replacing any row it conflicts with."""
        statement = insert(table_for(type(record))).prefix_with("OR REPLACE")
        self._write(statement, record.model_dump())

    def insert_all(self, records: Sequence[BaseModel], run_in_transaction: bool = True) -> int:
        """
        Insert a batch of records and return how many were written.

        With `run_in_transaction` the batch is sent as one executemany per table
        under a single commit; without it every record is inserted and committed
        on its own.
        """
        if not run_in_transaction:
            for record in records:
                self.insert(record)
            return len(records)

        with self.transaction():
            for table, rows in _group_rows(records).items():
                self._write(insert(table), rows)
        return len(records)

    def _upsert_many(self, records: Sequence[BaseModel]) -> None:
        for table, rows in _group_rows(records).items():
            self._write(insert(table).prefix_with("OR REPLACE"), rows)

    def insert_or_replace_all_with_children(
        self, records: Sequence[BaseModel], recursive: bool = False
    ) -> int:
        """
        Upsert a batch of records together with the children listed in each
        model's `child_fields`, all in one transaction.

        Only direct children are written unless `recursive` is set. Returns the
        number of rows written, children included.
        """
        written = 0
        with self.transaction():
            self._upsert_many(records)
            written += len(records)
            pending: List[BaseModel] = list(records)
            while pending:
                children: List[BaseModel] = []
                for record in pending:
                    for field_name in type(record).child_fields:
                        children.extend(getattr(record, field_name) or ())
                if children:
                    self._upsert_many(children)
                    written += len(children)
                pending = children if recursive else []
        return written

    # ------------------------------------------------------------------ reads

    def find(self, model: Type[ModelT], record_id: int) -> Optional[ModelT]:
        """Primary-key lookup; None when the id does not exist."""
        table = table_for(model)
        rows = self._read(select(table).where(table.c.id == record_id))
        return model.model_validate(dict(rows[0]._mapping)) if rows else None

    def query_by_id(self, model: Type[ModelT], record_id: int) -> List[ModelT]:
        """Run a parameterised SELECT by id and return every matching record."""
        table = table_for(model)
        rows = self._read(select(table).where(table.c.id == record_id))
        return [model.model_validate(dict(row._mapping)) for row in rows]

    def select_where_ids(self, model: Type[ModelT], ids: Sequence[int]) -> List[ModelT]:
        """Fetch every record whose id is in `ids` with a single IN query."""
        table = table_for(model)
        rows = self._read(select(table).where(table.c.id.in_(list(ids))))
        return [model.model_validate(dict(row._mapping)) for row in rows]

    def count(self, model: Type[BaseModel]) -> int:
        table = table_for(model)
        rows = self._read(select(func.count()).select_from(table))
        return int(rows[0][0])

    def ids(self, model: Type[BaseModel]) -> List[int]:
        table = table_for(model)
        rows = self._read(select(table.c.id).order_by(table.c.id))
        return [row[0] for row in rows]


__all__ = ["SqliteStore"]
