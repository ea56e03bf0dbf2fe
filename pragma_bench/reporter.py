from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pragma_bench.aggregator import BestResult
from pragma_bench.orchestrator import ConfigurationOutcome, ExperimentReport, RunOutcome
from pragma_bench.pragmas import describe_pragma_set

NAME_WIDTH = 50


def format_duration_ms(duration_seconds: float) -> str:
    return f"{duration_seconds * 1000:,.3f} ms"


def format_run(run: RunOutcome) -> str:
    """One report line for a strategy run (rich markup)."""
    name = escape(run.strategy.ljust(NAME_WIDTH))
    if run.ok and run.duration_seconds is not None:
        return f"{name}[green]{format_duration_ms(run.duration_seconds)}[/green]"
    return f"{name}[bold red]FAILED[/bold red] {escape(run.error or 'unknown error')}"


class ConsoleReporter:
    """
    Streams per-run timings to the console while the driver works.

    Implements the orchestrator's listener protocol; pass it as `listener=`.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)

    def configuration_started(self, outcome: ConfigurationOutcome, total: int) -> None:
        self.console.print()
        self.console.print(
            f"[bold cyan]Configuration {outcome.index}/{total}[/bold cyan] "
            f"{escape(describe_pragma_set(outcome.pragmas))}"
        )

    def run_finished(self, run: RunOutcome) -> None:
        self.console.print(format_run(run))

    def configuration_finished(self, outcome: ConfigurationOutcome) -> None:
        if outcome.failed:
            self.console.print(
                f"[bold red]Configuration failed during {outcome.failed_phase}:[/bold red] "
                f"{escape(outcome.error or '')}"
            )


def build_leaderboard(best: Sequence[BestResult]) -> Table:
    """
    Leaderboard table: one row per strategy, sorted by name, with every
    winning configuration listed (directives sorted for stable display).
    """
    table = Table(
        title="Fastest operations",
        box=box.ROUNDED,
        caption="Sorted by strategy name",
        show_lines=True,
    )
    table.add_column("Strategy", style="cyan", no_wrap=True)
    table.add_column("Duration (ms)", justify="right", style="bold green")
    table.add_column("Pragmas", style="yellow")

    for result in sorted(best, key=lambda r: r.strategy):
        pragma_lines = [escape(describe_pragma_set(pragmas)) for pragmas in result.pragma_sets]
        table.add_row(
            result.strategy,
            f"{result.duration_ms:,.3f}",
            "\n".join(pragma_lines),
        )
    return table


def _failure_lines(report: ExperimentReport) -> List[str]:
    lines: List[str] = []
    for cfg in report.configurations:
        label = escape(describe_pragma_set(cfg.pragmas))
        if cfg.failed:
            lines.append(f"{label}: configuration failed during {cfg.failed_phase}: {escape(cfg.error or '')}")
        for run in cfg.runs:
            if not run.ok:
                lines.append(f"{label}: {escape(run.strategy)} FAILED {escape(run.error or '')}")
    return lines


def print_report(report: ExperimentReport, console: Optional[Console] = None) -> None:
    """
    Render the final leaderboard, followed by every recorded failure.
    """
    console = console or Console(highlight=False)
    console.print()

    if not report.best:
        console.print("[yellow]No successful runs to rank.[/yellow]")
    else:
        console.print(build_leaderboard(report.best))

    failures = _failure_lines(report)
    if failures:
        console.print()
        console.print(f"[bold red]Failures ({len(failures)}):[/bold red]")
        for line in failures:
            console.print(f"  {line}")


__all__ = [
    "ConsoleReporter",
    "build_leaderboard",
    "format_duration_ms",
    "format_run",
    "print_report",
]
