"""
CLI result formatters.

Keeps rich rendering out of the command functions.
"""

import logging
from typing import Iterable, List

from rich.console import Console
from rich.table import Table

from rawsync.application.reconcile import ReconcileSummary, RunStatus
from rawsync.domain.job_spec import JobSpec

logger = logging.getLogger(__name__)
console = Console()


class ReconcileResultFormatter:
    """Formatter for job run summaries."""

    def display_summaries(self, summaries: List[ReconcileSummary]) -> None:
        title = "🔄 Reconcile Results"
        if summaries and summaries[0].dry_run:
            title += " (dry run)"

        table = Table(title=title)
        table.add_column("Job", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Raw rows", justify="right")
        table.add_column("Skipped", justify="right")
        table.add_column("Updated", justify="right", style="blue")
        table.add_column("Appended", justify="right", style="green")
        table.add_column("In raw", justify="right")
        table.add_column("Not in raw", justify="right", style="yellow")
        table.add_column("Cells changed", justify="right")

        for s in summaries:
            if s.status == RunStatus.FAILED:
                table.add_row(s.job, "[red]❌ Failed[/red]", *["-"] * 7)
                continue
            if s.status == RunStatus.EMPTY_SOURCE:
                table.add_row(s.job, "[yellow]⚠ Raw empty[/yellow]", *["-"] * 7)
                continue
            table.add_row(
                s.job,
                "[green]✅ Done[/green]",
                str(s.source_records),
                str(s.skipped_records),
                str(s.rows_updated),
                str(s.rows_appended),
                str(s.flagged_present),
                str(s.flagged_absent),
                "-" if s.dry_run else str(s.cells_changed),
            )

        console.print(table)

        for s in summaries:
            if s.error:
                console.print(f"[red]❌ {s.job}:[/red] {s.error}")
            if s.schema_gaps:
                gaps = ", ".join(f'"{g}"' for g in s.schema_gaps)
                console.print(f"[yellow]⚠ {s.job}: columns missing from raw: {gaps}[/yellow]")


class JobListFormatter:
    """Formatter for the available job definitions."""

    def display_jobs(self, jobs: Iterable[JobSpec]) -> None:
        table = Table(title="📋 Reconcile Jobs")
        table.add_column("Job", style="cyan", no_wrap=True)
        table.add_column("Target", style="blue")
        table.add_column("Raw", style="magenta")
        table.add_column("Key")
        table.add_column("Columns", justify="right")

        for job in jobs:
            key = job.key_spec
            parts = []
            for p in key.parts:
                parts.append(f"{p.source_field} (before '{p.delimiter}')" if p.delimiter else p.source_field)
            key_text = f" {key.separator} ".join(parts)
            if key.target_field not in key.source_fields:
                key_text += f" → {key.target_field}"
            table.add_row(
                job.name,
                job.target_table,
                job.source_table,
                key_text,
                str(len(job.field_map)),
            )

        console.print(table)
