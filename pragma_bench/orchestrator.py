"""
Experiment driver: runs the strategy catalog under every pragma combination.

For each subset of the configured pragmas the driver opens a fresh database
file, applies the subset, resets the table to the baseline population and runs
every selected strategy, feeding successful timings to the best-result
aggregator. Failures are captured per strategy (or per configuration when the
pragmas or the reset fail) and the remaining work carries on.

Usage (example from CLI):
    from pragma_bench.orchestrator import RunConfig, run_experiments

    report = run_experiments(RunConfig.from_settings())
    for best in report.best:
        print(best.strategy, best.duration_ms, best.pragma_sets)
"""

from __future__ import annotations

import json
import random
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Literal, Optional, Protocol, Sequence, Tuple

from pragma_bench.aggregator import BestResult, BestResults, TiePolicy
from pragma_bench.config import Settings, get_settings
from pragma_bench.infrastructure.db_factory import new_database_path, open_store
from pragma_bench.infrastructure.reset import reset_database
from pragma_bench.infrastructure.store import SqliteStore
from pragma_bench.pragmas import PragmaSet, count_pragma_sets, describe_pragma_set, iter_pragma_sets
from pragma_bench.strategies.abstract import BenchmarkStrategy, ExperimentContext
from pragma_bench.strategies.insert import (
    InsertAllInTransactionStrategy,
    InsertAllStrategy,
    InsertInTransactionStrategy,
    InsertStrategy,
)
from pragma_bench.strategies.search import (
    SearchInLoopInTransactionStrategy,
    SearchInLoopStrategy,
    SearchWithQueryInTransactionStrategy,
    SearchWithQueryStrategy,
    SearchWithTableInTransactionStrategy,
    SearchWithTableStrategy,
)
from pragma_bench.strategies.upsert import (
    InsertOrReplaceAllWithChildrenInTransactionStrategy,
    InsertOrReplaceAllWithChildrenStrategy,
    InsertOrReplaceInTransactionStrategy,
    InsertOrReplaceStrategy,
)
from pragma_bench.utils.clock import Clock, monotonic_clock
from pragma_bench.utils.logging import get_logger
from pragma_bench.utils.profiler import profile_block

log = get_logger(__name__)

FailurePolicy = Literal["tolerant", "strict"]
StoreFactory = Callable[[Path], SqliteStore]

DEFAULT_STRATEGY_NAMES: Tuple[str, ...] = (
    "insert",
    "insert_in_transaction",
    "insert_all",
    "insert_all_in_transaction",
    "insert_or_replace",
    "insert_or_replace_in_transaction",
    "insert_or_replace_all_with_children",
    "insert_or_replace_all_with_children_in_transaction",
)


# --------------------------------------------------------------------------- catalog


def _strategy_factories() -> Dict[str, Callable[[], BenchmarkStrategy]]:
    """Registry of available strategies, in catalog order."""
    return {
        "insert": lambda: InsertStrategy(),
        "insert_in_transaction": lambda: InsertInTransactionStrategy(),
        "insert_all": lambda: InsertAllStrategy(),
        "insert_all_in_transaction": lambda: InsertAllInTransactionStrategy(),
        "insert_or_replace": lambda: InsertOrReplaceStrategy(),
        "insert_or_replace_in_transaction": lambda: InsertOrReplaceInTransactionStrategy(),
        "insert_or_replace_all_with_children": lambda: InsertOrReplaceAllWithChildrenStrategy(),
        "insert_or_replace_all_with_children_in_transaction": (
            lambda: InsertOrReplaceAllWithChildrenInTransactionStrategy()
        ),
        "search_in_loop": lambda: SearchInLoopStrategy(),
        "search_in_loop_in_transaction": lambda: SearchInLoopInTransactionStrategy(),
        "search_with_query": lambda: SearchWithQueryStrategy(),
        "search_with_query_in_transaction": lambda: SearchWithQueryInTransactionStrategy(),
        "search_with_table": lambda: SearchWithTableStrategy(),
        "search_with_table_in_transaction": lambda: SearchWithTableInTransactionStrategy(),
    }


def available_strategies() -> List[str]:
    """List available strategy names."""
    return sorted(_strategy_factories().keys())


def default_strategies() -> List[str]:
    """Strategies run when none are requested, in catalog order."""
    factories = _strategy_factories()
    return [name for name in DEFAULT_STRATEGY_NAMES if name in factories]


def _resolve_strategy(name: str) -> BenchmarkStrategy:
    factories = _strategy_factories()
    if name not in factories:
        raise ValueError(f"Unknown strategy '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


def resolve_strategies(names: Optional[Iterable[str]] = None) -> List[BenchmarkStrategy]:
    """
    Instantiate the requested strategies in catalog order.

    None selects the default catalog; ["all"] selects every registered strategy.
    Unknown names raise ValueError.
    """
    factories = _strategy_factories()
    requested = list(names) if names is not None else default_strategies()
    if requested == ["all"]:
        requested = list(factories)
    unknown = [name for name in requested if name not in factories]
    if unknown:
        raise ValueError(
            f"Unknown strategy '{unknown[0]}'. Available: {', '.join(factories)}"
        )
    return [_resolve_strategy(name) for name in factories if name in requested]


# --------------------------------------------------------------------------- results


@dataclass(frozen=True)
class RunConfig:
    """Effective options for one invocation of the driver."""

    pragmas: Tuple[str, ...] = ()
    database_size: int = 20_000
    operation_count: int = 500
    strategy_names: Optional[Tuple[str, ...]] = None
    data_dir: str = "."
    tie_policy: TiePolicy = TiePolicy.FIRST_SEEN
    reset_per_strategy: bool = False
    failure_policy: FailurePolicy = "tolerant"
    seed: int = 42
    persist: bool = False
    results_dir: str = "results"

    def __post_init__(self) -> None:
        if self.database_size < 0:
            raise ValueError(f"database_size must be >= 0, got {self.database_size}")
        if self.operation_count < 0:
            raise ValueError(f"operation_count must be >= 0, got {self.operation_count}")
        if self.failure_policy not in ("tolerant", "strict"):
            raise ValueError(f"Unknown failure policy '{self.failure_policy}'")
        object.__setattr__(self, "pragmas", tuple(self.pragmas))
        object.__setattr__(self, "tie_policy", TiePolicy(self.tie_policy))
        if self.strategy_names is not None:
            object.__setattr__(self, "strategy_names", tuple(self.strategy_names))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "RunConfig":
        """Build a config from settings, then apply non-None overrides."""
        settings = settings or get_settings()
        config = cls(
            pragmas=tuple(settings.benchmark_pragmas),
            database_size=settings.benchmark_database_size,
            operation_count=settings.benchmark_operation_count,
            data_dir=settings.benchmark_data_dir,
            tie_policy=TiePolicy(settings.benchmark_tie_policy),
            reset_per_strategy=settings.benchmark_reset_per_strategy,
            seed=settings.benchmark_seed,
            results_dir=settings.benchmark_results_dir,
        )
        return replace(config, **{k: v for k, v in overrides.items() if v is not None})


@dataclass
class RunOutcome:
    """Timing or failure marker for one strategy under one pragma set."""

    strategy: str
    pragmas: PragmaSet
    duration_seconds: Optional[float] = None
    rows: int = 0
    first_id: Optional[int] = None
    next_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def duration_ms(self) -> Optional[float]:
        return None if self.duration_seconds is None else self.duration_seconds * 1000.0


@dataclass
class ConfigurationOutcome:
    """Everything that happened while one pragma set was explored."""

    index: int
    pragmas: PragmaSet
    database_path: str
    runs: List[RunOutcome] = field(default_factory=list)
    error: Optional[str] = None
    failed_phase: Optional[str] = None
    reset_seconds: Optional[float] = None
    profile: Optional[Dict[str, Any]] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class ExperimentReport:
    config: RunConfig
    configurations: List[ConfigurationOutcome]
    best: List[BestResult]
    started_at: str
    finished_at: str

    def failures(self) -> List[RunOutcome]:
        return [run for cfg in self.configurations for run in cfg.runs if not run.ok]

    def as_dict(self) -> Dict[str, Any]:
        config = asdict(self.config)
        config["tie_policy"] = self.config.tie_policy.value
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "config": config,
            "configurations": [asdict(cfg) for cfg in self.configurations],
            "best": [
                {
                    "strategy": best.strategy,
                    "duration_seconds": best.duration_seconds,
                    "pragma_sets": [list(p) for p in best.pragma_sets],
                }
                for best in self.best
            ],
        }


class ExperimentListener(Protocol):
    """Receives progress as the driver works; implemented by the reporter."""

    def configuration_started(self, outcome: ConfigurationOutcome, total: int) -> None: ...

    def run_finished(self, run: RunOutcome) -> None: ...

    def configuration_finished(self, outcome: ConfigurationOutcome) -> None: ...


# --------------------------------------------------------------------------- driver


def _failure_marker(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


def _notify(listener: Optional[ExperimentListener], event: str, *args: Any) -> None:
    """Forward an event to the listener; reporting errors never reach the driver."""
    if listener is None:
        return
    try:
        getattr(listener, event)(*args)
    except Exception:  # noqa: BLE001 - reporting must not affect experiment state
        log.exception("Listener failed", extra={"event": event})


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True, default=str)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _reset(store: SqliteStore, size: int) -> Tuple[int, float]:
    with profile_block("reset") as stats:
        next_id = reset_database(store, size)
    log.info(
        f"[RESET] {size} rows in {stats.duration_seconds * 1000:.1f} ms",
        extra={"rows": size, "duration": stats.duration_seconds, "peak_rss": stats.peak_rss_bytes},
    )
    return next_id, stats.duration_seconds


def _execute_strategy(
    strategy: BenchmarkStrategy,
    context: ExperimentContext,
    count: int,
    failure_policy: FailurePolicy,
) -> RunOutcome:
    first_id = context.next_id
    try:
        result = strategy.execute(context, count)
    except Exception as exc:  # noqa: BLE001 - intentional broad catch to record failures
        log.exception(
            f"[STRATEGY FAILED] {strategy.name}",
            extra={"strategy": strategy.name, "pragmas": list(context.pragmas)},
        )
        if failure_policy == "strict":
            raise
        return RunOutcome(
            strategy=strategy.name,
            pragmas=context.pragmas,
            first_id=first_id,
            next_id=context.next_id,
            error=_failure_marker(exc),
        )

    log.debug(
        f"[STRATEGY SUCCESS] {strategy.name}",
        extra={"strategy": strategy.name, "duration": result["duration_seconds"]},
    )
    return RunOutcome(
        strategy=strategy.name,
        pragmas=context.pragmas,
        duration_seconds=result["duration_seconds"],
        rows=result.get("rows", count),
        first_id=result.get("first_id"),
        next_id=result.get("next_id"),
    )


def run_configuration(
    index: int,
    pragmas: PragmaSet,
    strategies: Sequence[BenchmarkStrategy],
    config: RunConfig,
    aggregator: BestResults,
    *,
    clock: Clock = monotonic_clock,
    listener: Optional[ExperimentListener] = None,
    store_factory: StoreFactory = open_store,
    total: int = 1,
) -> ConfigurationOutcome:
    """
    Explore one pragma set: open, configure, reset, run every strategy, close.

    A rejected pragma or a failed reset ends this configuration (no strategy
    runs against it) and is recorded on the returned outcome. Under the strict
    policy the first failure is re-raised once the store is closed.
    """
    outcome = ConfigurationOutcome(index=index, pragmas=pragmas, database_path="")
    _notify(listener, "configuration_started", outcome, total)
    strict = config.failure_policy == "strict"

    phase = "open"
    try:
        path = new_database_path(config.data_dir)
        outcome.database_path = str(path)
        store = store_factory(path)
    except Exception as exc:  # noqa: BLE001 - recorded as configuration failure
        log.exception(
            "[CONFIGURATION FAILED] open",
            extra={"data_dir": config.data_dir, "path": outcome.database_path},
        )
        if strict:
            raise
        outcome.error, outcome.failed_phase = _failure_marker(exc), phase
        _notify(listener, "configuration_finished", outcome)
        return outcome

    try:
        with profile_block(f"configuration-{index}") as stats:
            try:
                phase = "configure"
                for pragma in pragmas:
                    value = store.execute_scalar(pragma)
                    log.debug("Pragma applied", extra={"pragma": pragma, "result": value})

                phase = "reset"
                next_id, outcome.reset_seconds = _reset(store, config.database_size)
                context = ExperimentContext(
                    store=store,
                    population=config.database_size,
                    next_id=next_id,
                    pragmas=pragmas,
                    clock=clock,
                    rng=random.Random(config.seed),
                )

                phase = "run"
                for position, strategy in enumerate(strategies):
                    if config.reset_per_strategy and position > 0:
                        phase = "reset"
                        context.next_id, _ = _reset(store, config.database_size)
                        phase = "run"
                    run = _execute_strategy(
                        strategy, context, config.operation_count, config.failure_policy
                    )
                    outcome.runs.append(run)
                    if run.ok and run.duration_seconds is not None:
                        aggregator.record(run.strategy, run.pragmas, run.duration_seconds)
                    _notify(listener, "run_finished", run)
            except Exception as exc:  # noqa: BLE001 - recorded as configuration failure
                if phase == "run" or strict:
                    raise
                log.exception(
                    f"[CONFIGURATION FAILED] {phase}",
                    extra={"pragmas": list(pragmas), "phase": phase},
                )
                outcome.error, outcome.failed_phase = _failure_marker(exc), phase
        outcome.profile = stats.as_dict()
    finally:
        store.close()

    _notify(listener, "configuration_finished", outcome)
    return outcome


def run_experiments(
    config: RunConfig,
    *,
    clock: Optional[Clock] = None,
    aggregator: Optional[BestResults] = None,
    listener: Optional[ExperimentListener] = None,
    store_factory: StoreFactory = open_store,
) -> ExperimentReport:
    """
    Run the selected strategies under every subset of `config.pragmas`.

    Parameters
    ----------
    config : RunConfig
        Pragmas, sizes, strategy selection and policies.
    clock : Clock, optional
        Time source handed to strategies; defaults to a monotonic clock.
    aggregator : BestResults, optional
        Shared aggregator; a new one using `config.tie_policy` otherwise.
    listener : ExperimentListener, optional
        Progress sink, usually the console reporter.
    store_factory : callable
        Opens a store on a database path.

    Returns
    -------
    ExperimentReport
        Per-configuration outcomes and the final best results.
    """
    strategies = resolve_strategies(config.strategy_names)
    if aggregator is None:
        aggregator = BestResults(config.tie_policy)
    clock = clock or monotonic_clock
    total = count_pragma_sets(config.pragmas)
    started_at = datetime.now(timezone.utc).isoformat()

    log.info(
        f"[EXPERIMENT] {total} pragma combination(s) x {len(strategies)} strategy/strategies",
        extra={
            "combinations": total,
            "strategies": [s.name for s in strategies],
            "database_size": config.database_size,
            "operation_count": config.operation_count,
        },
    )

    configurations: List[ConfigurationOutcome] = []
    for index, pragmas in enumerate(iter_pragma_sets(config.pragmas), start=1):
        log.info(
            f"[CONFIGURATION {index}/{total}] {describe_pragma_set(pragmas)}",
            extra={"pragmas": list(pragmas), "index": index, "total": total},
        )
        configurations.append(
            run_configuration(
                index,
                pragmas,
                strategies,
                config,
                aggregator,
                clock=clock,
                listener=listener,
                store_factory=store_factory,
                total=total,
            )
        )

    report = ExperimentReport(
        config=config,
        configurations=configurations,
        best=aggregator.snapshot(),
        started_at=started_at,
        finished_at=datetime.now(timezone.utc).isoformat(),
    )

    if config.persist:
        _persist_results(report.as_dict(), Path(config.results_dir))

    log.info(
        f"[EXPERIMENT COMPLETE] {len(configurations)} configuration(s), "
        f"{len(report.failures())} failed run(s)",
        extra={"configurations": len(configurations), "failures": len(report.failures())},
    )
    return report


__all__ = [
    "DEFAULT_STRATEGY_NAMES",
    "ConfigurationOutcome",
    "ExperimentListener",
    "ExperimentReport",
    "RunConfig",
    "RunOutcome",
    "available_strategies",
    "default_strategies",
    "resolve_strategies",
    "run_configuration",
    "run_experiments",
]
