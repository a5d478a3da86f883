"""
CLI Orchestrator - Main Entry Point

Commands:
    rawsync run WORKBOOK --job ECs      reconcile one or more jobs
    rawsync run WORKBOOK --all          reconcile every known job
    rawsync jobs                        list job definitions
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from rawsync.application.reconcile import ReconcileService
from rawsync.domain.errors import ConfigurationError
from rawsync.infrastructure.config_loader import ConfigLoader
from rawsync.infrastructure.excel_storage import WorkbookStorage
from rawsync.infrastructure.logging_config import setup_logging
from rawsync.interface.cli.formatters import JobListFormatter, ReconcileResultFormatter

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="rawsync",
    help="🔄 Keep curated workbook sheets in sync with their RAW refreshes",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="JSON file with job definitions (merged over the built-in jobs).",
)


@app.command("run")
def run_command(
    workbook: Path = typer.Argument(..., help="Workbook (.xlsx) holding the target and RAW sheets."),
    job: Optional[List[str]] = typer.Option(None, "--job", "-j", help="Job to run; repeat for several."),
    all_jobs: bool = typer.Option(False, "--all", help="Run every known job."),
    config: Optional[Path] = CONFIG_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without saving."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save to this file instead of overwriting the workbook."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show INFO logs on the console."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write DEBUG logs here."),
):
    """
    Reconcile curated sheets against their RAW sheets.

    Existing rows are updated in place, new keys are appended with a
    border, and every row's "In Raw?" flag is recomputed.
    """
    setup_logging(logging.INFO if verbose else logging.WARNING, log_file)

    if not job and not all_jobs:
        console.print("[red]❌ Error:[/red] choose at least one --job, or --all")
        raise typer.Exit(2)

    loader = ConfigLoader(config)
    try:
        if all_jobs:
            jobs = list(loader.load_jobs().values())
        else:
            jobs = [loader.get_job(name) for name in job]
    except (ConfigurationError, FileNotFoundError, PermissionError, ValueError) as e:
        logger.error("Job configuration failed: %s", e)
        console.print(f"[red]❌ Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        storage = WorkbookStorage.open(workbook)
    except FileNotFoundError as e:
        console.print(f"[red]❌ Error:[/red] {e}")
        raise typer.Exit(1)

    service = ReconcileService(storage)
    summaries = service.run_many(jobs, dry_run=dry_run)
    ReconcileResultFormatter().display_summaries(summaries)

    if not dry_run and any(s.ok for s in summaries):
        try:
            saved = storage.save(output)
        except PermissionError as e:
            console.print(f"[red]❌ Error:[/red] {e}")
            raise typer.Exit(1)
        console.print(f"[green]✅ Saved {saved}[/green]")
    storage.close()

    if not all(s.ok for s in summaries):
        raise typer.Exit(1)


@app.command("jobs")
def jobs_command(config: Optional[Path] = CONFIG_OPTION):
    """
    List the available reconcile jobs.
    """
    try:
        jobs = ConfigLoader(config).load_jobs()
    except (ConfigurationError, FileNotFoundError, PermissionError, ValueError) as e:
        console.print(f"[red]❌ Error:[/red] {e}")
        raise typer.Exit(1)
    JobListFormatter().display_jobs(jobs.values())


if __name__ == "__main__":
    app()
