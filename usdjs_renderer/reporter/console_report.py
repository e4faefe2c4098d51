"""Console summary for a batch comparison run."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from usdjs_renderer.models.run_report import RunReport

MAX_LISTED_FAILURES = 50


def print_run_report(report: RunReport, console: Console, max_failures: int = MAX_LISTED_FAILURES) -> None:
    """Print counts and the first *max_failures* failure reasons."""
    table = Table(title="Comparison Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Samples", str(report.total))
    table.add_row("OK", f"[green]{report.ok}[/green]")
    table.add_row("Skipped", f"[yellow]{report.skipped}[/yellow]")
    table.add_row("Failed", f"[red]{report.failed}[/red]")
    console.print(table)

    plain = {"markup": False, "highlight": False, "soft_wrap": True}
    if report.skipped:
        console.print(f"Skipped: {report.skipped}", **plain)

    failures = report.failures
    if failures:
        console.print(f"Failures: {len(failures)}", **plain)
        for f in failures[:max_failures]:
            console.print(f"- {f.sample_rel}: {f.reason}", **plain)
        if len(failures) > max_failures:
            console.print(f"...and {len(failures) - max_failures} more", **plain)
