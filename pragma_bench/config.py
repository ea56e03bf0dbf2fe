"""
Configuration settings for the SQLite Pragma Bench.

Uses Pydantic Settings to load environment variables for logging, the pragma
search space, and the benchmark sizes. Values can also come from a local `.env`
file; CLI options override them per run.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRAGMAS: List[str] = [
    "PRAGMA journal_mode = OFF",
    "PRAGMA synchronous = OFF",
    "PRAGMA locking_mode = EXCLUSIVE",
]


class Settings(BaseSettings):
    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Benchmark defaults
    benchmark_database_size: int = Field(20_000, alias="BENCHMARK_DATABASE_SIZE", ge=0)
    benchmark_operation_count: int = Field(500, alias="BENCHMARK_OPERATION_COUNT", ge=0)
    benchmark_pragmas: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PRAGMAS), alias="BENCHMARK_PRAGMAS"
    )
    benchmark_data_dir: str = Field(".", alias="BENCHMARK_DATA_DIR")
    benchmark_results_dir: str = Field("results", alias="BENCHMARK_RESULTS_DIR")
    benchmark_tie_policy: Literal["first_seen", "accumulate"] = Field(
        "first_seen", alias="BENCHMARK_TIE_POLICY"
    )
    benchmark_reset_per_strategy: bool = Field(False, alias="BENCHMARK_RESET_PER_STRATEGY")
    benchmark_seed: int = Field(42, alias="BENCHMARK_SEED")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_PRAGMAS", "Settings", "get_settings"]
