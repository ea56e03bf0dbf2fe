"""
Abstract strategy interfaces and result contracts for the SQLite Pragma Bench.

Concrete strategies (single inserts, bulk inserts, upserts, lookups) implement
AbstractBenchmarkStrategy and return a StrategyResult TypedDict so the
orchestrator and reporter can treat them uniformly.
"""

from __future__ import annotations

import abc
import random
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Protocol, TypedDict, TypeVar, runtime_checkable

from pragma_bench.domain.generator import generate_records
from pragma_bench.domain.models import Record
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.pragmas import PragmaSet
from pragma_bench.utils.clock import Clock, monotonic_clock

InputT = TypeVar("InputT")


class StrategyResult(TypedDict, total=False):
    """
    Metrics returned by a single strategy run.

    `first_id`/`next_id` describe the identifier range the run consumed; they
    are equal for read strategies.
    """

    rows: int
    duration_seconds: float
    first_id: int
    next_id: int
    notes: Optional[str]


@dataclass
class ExperimentContext:
    """
    State owned by one configuration's experiment.

    Holds the open store and the identifier counter. A new context is built for
    every configuration, so nothing leaks from one configuration to the next.
    """

    store: SqliteStore
    population: int = 0
    next_id: int = 0
    pragmas: PragmaSet = ()
    clock: Clock = monotonic_clock
    rng: random.Random = field(default_factory=random.Random)


@runtime_checkable
class BenchmarkStrategy(Protocol):
    """
    Common interface all benchmark strategies must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the approach.
    """

    name: str
    description: str

    def execute(self, context: ExperimentContext, count: int) -> StrategyResult:
        """
        Run the strategy `count` times against the context's store.

        Returns
        -------
        StrategyResult
            Rows touched and the measured duration.
        """
        ...


class AbstractBenchmarkStrategy(abc.ABC, Generic[InputT]):
    """
    Template for timed strategies.

    Input is built by `_prepare` before the clock starts; only `_run` is timed.
    When `advances_ids` is set the context counter moves past the run's
    `count` identifiers once `_run` has been attempted, whether it returned or
    raised, so no identifier is handed out twice within a configuration.
    """

    name: str
    description: str
    advances_ids: bool = False

    @abc.abstractmethod
    def _prepare(self, context: ExperimentContext, count: int) -> InputT:
        """Build the run's input outside the measured window."""
        raise NotImplementedError

    @abc.abstractmethod
    def _run(self, store: SqliteStore, payload: InputT) -> Any:  # pragma: no cover - interface only
        """The measured persistence or lookup work."""
        raise NotImplementedError

    def execute(self, context: ExperimentContext, count: int) -> StrategyResult:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        payload = self._prepare(context, count)

        first_id = context.next_id
        try:
            start = context.clock()
            self._run(context.store, payload)
            duration = context.clock() - start
        finally:
            # A failed run may have persisted part of its range.
            if self.advances_ids:
                context.next_id = first_id + count
        return StrategyResult(
            rows=count,
            duration_seconds=duration,
            first_id=first_id,
            next_id=context.next_id,
            notes=self.description,
        )


class AbstractWriteStrategy(AbstractBenchmarkStrategy[List[Record]]):
    """Base for strategies persisting freshly generated records."""

    advances_ids = True

    def _prepare(self, context: ExperimentContext, count: int) -> List[Record]:
        return generate_records(count, start_id=context.next_id)


class AbstractReadStrategy(AbstractBenchmarkStrategy[List[int]]):
    """Base for strategies looking up ids drawn from the seeded population."""

    def _prepare(self, context: ExperimentContext, count: int) -> List[int]:
        if context.population <= 0:
            return []
        return [context.rng.randrange(context.population) for _ in range(count)]


__all__ = [
    "AbstractBenchmarkStrategy",
    "AbstractReadStrategy",
    "AbstractWriteStrategy",
    "BenchmarkStrategy",
    "ExperimentContext",
    "StrategyResult",
]
