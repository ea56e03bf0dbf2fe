"""
SQLAlchemy table definitions for the benchmarked records.

Each pydantic model persisted by the store maps to one Core table here. The
uniqueness constraints mirror the model's documented contract and are what
make the insert strategies pay for index maintenance.
"""

from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel
from sqlalchemy import Column, Integer, MetaData, String, Table

from pragma_bench.domain.models import Record

metadata = MetaData()

records_table = Table(
    "records",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", String, unique=True),
    Column("prop1", String, unique=True),
    Column("prop2", String, unique=True),
    Column("prop3", String, unique=True),
    Column("prop4", String, unique=True),
)

_TABLES: Dict[Type[BaseModel], Table] = {
    Record: records_table,
}


def table_for(model: Type[BaseModel]) -> Table:
    """Return the table a model persists to."""
    try:
        return _TABLES[model]
    except KeyError:
        raise ValueError(f"No table registered for model {model.__name__}") from None


__all__ = ["metadata", "records_table", "table_for"]
