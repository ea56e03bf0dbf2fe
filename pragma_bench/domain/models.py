"""
Domain models for the SQLite Pragma Bench.

Defines the benchmarked record schema. The matching table lives in
`pragma_bench.infrastructure.schema`; this model is what strategies build
and hand to the store.
"""
from __future__ import annotations

from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    Representation of a single row in the `records` table.

    Every string column is declared UNIQUE in the table. Only `name` is filled
    by the generator; the remaining properties stay NULL, which SQLite allows
    to repeat under a UNIQUE constraint.
    """

    # Names of attributes holding child record collections, persisted by the
    # cascading upsert. Records have no children.
    child_fields: ClassVar[Tuple[str, ...]] = ()

    id: int = Field(..., ge=0, description="Primary key, assigned by the generator.")
    name: Optional[str] = Field(None, description="Unique display name.")
    prop1: Optional[str] = Field(None, description="Unique optional property.")
    prop2: Optional[str] = Field(None, description="Unique optional property.")
    prop3: Optional[str] = Field(None, description="Unique optional property.")
    prop4: Optional[str] = Field(None, description="Unique optional property.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


__all__ = ["Record"]
