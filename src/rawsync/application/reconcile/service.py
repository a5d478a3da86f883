"""
Reconcile Service - Main Orchestrator.

Runs reconciliation jobs against a TableStorage:

1. Read the target table, validate its headers (fatal on failure)
2. Read the raw table (fatal if missing, stop quietly if it has no data)
3. Resolve the raw headers (missing columns become gaps)
4. Plan the run with the engine
5. Apply writes, new-row decorations and the final flag sweep

Usage:
    from rawsync.application.reconcile import ReconcileService
    from rawsync.infrastructure.excel_storage import WorkbookStorage

    storage = WorkbookStorage.open("tracker.xlsx")
    summary = ReconcileService(storage).run(get_job("ECs"))
    storage.save()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from rawsync.application.reconcile.engine import ReconcilePlan, plan_reconciliation
from rawsync.domain.errors import ConfigurationError, TableNotFoundError
from rawsync.domain.schema import resolve_source_schema, resolve_target_schema

if TYPE_CHECKING:
    from rawsync.domain.job_spec import JobSpec
    from rawsync.domain.schema import TargetSchema
    from rawsync.domain.storage import TableSnapshot, TableStorage

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Outcome of one job run."""

    COMPLETED = "completed"
    EMPTY_SOURCE = "empty_source"
    FAILED = "failed"


@dataclass
class ReconcileSummary:
    """Counts reported at the end of a job run."""

    job: str
    status: RunStatus = RunStatus.COMPLETED
    source_records: int = 0
    skipped_records: int = 0
    rows_updated: int = 0
    rows_appended: int = 0
    flagged_present: int = 0
    flagged_absent: int = 0
    cells_changed: int = 0
    schema_gaps: list[str] = field(default_factory=list)
    dry_run: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.FAILED

    def describe(self) -> str:
        """One-line summary for logs and the CLI."""
        if self.status == RunStatus.FAILED:
            return f"{self.job}: failed - {self.error}"
        if self.status == RunStatus.EMPTY_SOURCE:
            return f"{self.job}: nothing to reconcile (raw table has no data)"
        prefix = "[dry run] " if self.dry_run else ""
        return (
            f"{prefix}{self.job}: {self.rows_updated} updated, "
            f"{self.rows_appended} appended, {self.flagged_absent} no longer in raw"
        )


class ReconcileService:
    """
    Apply reconciliation jobs to one storage.

    The service owns no run state; every call to run() starts from a
    fresh read of both tables.
    """

    def __init__(self, storage: "TableStorage") -> None:
        self.storage = storage

    def _read_target(self, job: "JobSpec") -> "TableSnapshot":
        target = self.storage.read_table(job.target_table)
        if target is None:
            raise TableNotFoundError(job.target_table)
        if not target.header:
            raise TableNotFoundError(job.target_table, reason="has no data")
        return target

    def run(self, job: "JobSpec", dry_run: bool = False) -> ReconcileSummary:
        """
        Reconcile one job.

        Args:
            job: Job definition
            dry_run: Plan and count without writing any cell

        Returns:
            ReconcileSummary

        Raises:
            ConfigurationError: Missing table/header or rejected duplicates,
                always before the first write
        """
        logger.info(
            'Job %s: "%s" <- "%s"', job.name, job.target_table, job.source_table
        )
        summary = ReconcileSummary(job=job.name, dry_run=dry_run)

        # ─────────────────────────────────────────────────────────────
        # PHASE 1: Validate both tables
        # ─────────────────────────────────────────────────────────────
        target = self._read_target(job)
        target_schema = resolve_target_schema(target, job)

        source = self.storage.read_table(job.source_table)
        if source is None:
            raise TableNotFoundError(job.source_table)
        if not source.header or source.is_empty:
            logger.info("Job %s: nothing to reconcile, target untouched", job.name)
            summary.status = RunStatus.EMPTY_SOURCE
            return summary

        source_schema = resolve_source_schema(source, job)
        summary.schema_gaps = list(source_schema.gaps)

        # ─────────────────────────────────────────────────────────────
        # PHASE 2: Plan
        # ─────────────────────────────────────────────────────────────
        target_keys = self.storage.read_column(
            job.target_table, target_schema.offset(job.key_spec.target_field)
        )
        plan = plan_reconciliation(
            source_schema.records(source.rows),
            target_keys,
            job,
            target.first_data_position,
        )
        self._fill_counts(summary, plan)

        if dry_run:
            logger.info("Job %s: dry run, no cells written", job.name)
            return summary

        # ─────────────────────────────────────────────────────────────
        # PHASE 3: Apply
        # ─────────────────────────────────────────────────────────────
        summary.cells_changed = self._apply(job, target, target_schema, plan)
        logger.info("Job %s: %d cells changed", job.name, summary.cells_changed)
        return summary

    def run_many(self, jobs: Iterable["JobSpec"], dry_run: bool = False) -> list[ReconcileSummary]:
        """
        Run jobs one after another.

        A configuration error fails only its own job; the rest still run.
        """
        results = []
        for job in jobs:
            try:
                results.append(self.run(job, dry_run=dry_run))
            except ConfigurationError as e:
                logger.error("Job %s failed: %s", job.name, e)
                results.append(
                    ReconcileSummary(
                        job=job.name,
                        status=RunStatus.FAILED,
                        dry_run=dry_run,
                        error=str(e),
                    )
                )
        return results

    @staticmethod
    def _fill_counts(summary: ReconcileSummary, plan: ReconcilePlan) -> None:
        summary.source_records = plan.source_records
        summary.skipped_records = plan.skipped_records
        summary.rows_updated = len(plan.updated_positions)
        summary.rows_appended = len(plan.inserted_positions)
        summary.flagged_present = plan.flagged_present
        summary.flagged_absent = plan.flagged_absent

    def _apply(
        self,
        job: "JobSpec",
        target: "TableSnapshot",
        schema: "TargetSchema",
        plan: ReconcilePlan,
    ) -> int:
        """Write the plan; return the number of cells whose value changed."""
        table = job.target_table
        flag_column = schema.offset(job.presence_flag_field)
        changed = 0
        for write in plan.writes:
            for field_name, value in write.values.items():
                if self.storage.write_cell(table, write.position, schema.offset(field_name), value):
                    changed += 1
            if write.is_insert:
                self.storage.decorate_row(table, write.position, target.column_span)

        for position, flag in plan.flags.items():
            if self.storage.write_cell(table, position, flag_column, flag.value):
                changed += 1
        return changed
