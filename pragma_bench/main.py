from __future__ import annotations

import sys
from typing import List, Optional

import typer

from pragma_bench.aggregator import TiePolicy
from pragma_bench.config import get_settings
from pragma_bench.orchestrator import (
    RunConfig,
    available_strategies,
    default_strategies,
    resolve_strategies,
    run_experiments,
)
from pragma_bench.pragmas import count_pragma_sets
from pragma_bench.reporter import ConsoleReporter, print_report
from pragma_bench.utils.logging import configure_logging

app = typer.Typer(help="SQLite Pragma Bench CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"database_size={settings.benchmark_database_size} "
        f"operation_count={settings.benchmark_operation_count} "
        f"data_dir={settings.benchmark_data_dir} tie_policy={settings.benchmark_tie_policy}"
    )
    typer.echo(
        f"pragmas ({count_pragma_sets(settings.benchmark_pragmas)} combinations):"
    )
    for pragma in settings.benchmark_pragmas:
        typer.echo(f"  {pragma}")


@app.command()
def strategies() -> None:
    """
    List strategy names; default ones are marked with '*'.
    """
    defaults = set(default_strategies())
    for name in available_strategies():
        typer.echo(f"{'*' if name in defaults else ' '} {name}")


@app.command()
def run(
    pragma: Optional[List[str]] = typer.Option(
        None,
        "--pragma",
        "-p",
        help="Base pragma statement (repeatable). Replaces the configured list.",
    ),
    no_pragmas: bool = typer.Option(
        False,
        "--no-pragmas",
        help="Run a single configuration with no pragmas applied.",
    ),
    database_size: Optional[int] = typer.Option(
        None,
        "--database-size",
        "-n",
        min=0,
        help="Baseline rows seeded before the strategies run (default from settings).",
    ),
    operation_count: Optional[int] = typer.Option(
        None,
        "--operation-count",
        "-c",
        min=0,
        help="Operations per strategy run (default from settings).",
    ),
    strategy: Optional[List[str]] = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Strategy to run (repeatable), or 'all'. Defaults to the insert catalog.",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory receiving one database file per configuration.",
    ),
    tie_policy: Optional[TiePolicy] = typer.Option(
        None,
        "--tie-policy",
        help="How equal best durations are handled.",
    ),
    reset_per_strategy: Optional[bool] = typer.Option(
        None,
        "--reset-per-strategy/--reset-once",
        help="Reset the table before every strategy instead of once per configuration.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Abort on the first failure instead of recording it and continuing.",
    ),
    persist: bool = typer.Option(
        False,
        "--persist",
        help="Write the report as JSON to the results directory.",
    ),
) -> None:
    """
    Run every strategy under every pragma combination and print the fastest.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    pragmas = [] if no_pragmas else pragma
    try:
        config = RunConfig.from_settings(
            settings,
            pragmas=tuple(pragmas) if pragmas is not None else None,
            database_size=database_size,
            operation_count=operation_count,
            strategy_names=tuple(strategy) if strategy else None,
            data_dir=data_dir,
            tie_policy=tie_policy,
            reset_per_strategy=reset_per_strategy,
            failure_policy="strict" if strict else None,
            persist=persist or None,
        )
        resolve_strategies(config.strategy_names)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)

    report = run_experiments(config, listener=ConsoleReporter())

    print_report(report)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
