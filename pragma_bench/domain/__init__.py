"""
Domain package for the SQLite Pragma Bench.

Exports the record model and the generator that produces benchmark input.
Keep this package focused on data definitions and validation concerns.
"""

from pragma_bench.domain.generator import generate_records, iter_records
from pragma_bench.domain.models import Record

__all__ = [
    "Record",
    "generate_records",
    "iter_records",
]
