"""
Database file and store factory utilities for the SQLite Pragma Bench.

Every explored pragma combination gets a brand-new database file so that each
configuration starts from clean storage, not just a clean table. Files are
named with a random UUID and are never reused or removed by the harness.

Includes retry logic for transient open failures using tenacity.
"""

from __future__ import annotations

import uuid
from pathlib import Path

from sqlalchemy.exc import OperationalError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.utils.logging import get_logger

log = get_logger(__name__)


def new_database_path(data_dir: Path | str = ".") -> Path:
    """
    Build a unique database file path inside `data_dir`.

    The directory is created if needed; the file itself is created by SQLite
    when the store connects.
    """
    directory = Path(data_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{uuid.uuid4()}.db"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
def open_store(path: Path | str) -> SqliteStore:
    """
    Open a store on `path` with automatic retry.

    Retries up to 3 times with exponential backoff when SQLite reports a
    transient operational error (e.g. the file is momentarily locked).

    Raises
    ------
    sqlalchemy.exc.OperationalError
        If the database cannot be opened after all retry attempts.
    """
    log.debug("Opening store", extra={"path": str(path)})
    return SqliteStore(path)


__all__ = ["new_database_path", "open_store"]
