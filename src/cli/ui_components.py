"""Rich UI components for the CLI.

Kept apart from the command so tables and styles can be reused; everything
here goes to stderr, stdout is reserved for JSON.
"""

from __future__ import annotations

from typing import Sequence

from rich.table import Table

from core.domain.models import RequestFailure, RequestOutcome


def build_outcomes_table(outcomes: Sequence[RequestOutcome]) -> Table:
    """Summary table of a finished batch, in completion order."""

    table = Table(title="Requests")
    table.add_column("URL", style="magenta", overflow="fold")
    table.add_column("Status", style="cyan", no_wrap=True)
    table.add_column("Result", no_wrap=True)
    table.add_column("ms", style="dim", justify="right")

    for outcome in outcomes:
        status = str(outcome.status_code) if outcome.status_code is not None else "-"
        if isinstance(outcome, RequestFailure):
            result = f"[red]{outcome.error.value}[/red]"
        else:
            result = "[green]ok[/green]"
        elapsed = f"{outcome.elapsed_ms:.0f}" if outcome.elapsed_ms is not None else "-"
        table.add_row(outcome.url, status, result, elapsed)

    ok = sum(1 for o in outcomes if o.ok)
    table.caption = f"{ok} ok, {len(outcomes) - ok} failed"
    return table
