"""
Header resolution for target and source tables.

Header names are resolved once, at run start, into column offsets.
Everything a job writes to must exist in the target up front. Raw
columns that are missing are tolerated and reported as gaps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rawsync.domain.errors import MissingHeaderError
from rawsync.domain.job_spec import JobSpec
from rawsync.domain.records import CellValue
from rawsync.domain.storage import TableSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetSchema:
    """Validated target header -> column offset table."""

    table: str
    columns: dict[str, int]

    def offset(self, field_name: str) -> int:
        return self.columns[field_name]


@dataclass(frozen=True)
class SourceSchema:
    """
    Raw header -> column offset table.

    ``gaps`` lists key and copy sources the raw header row does not
    contain; those fields read as empty for every record.
    """

    table: str
    columns: dict[str, int]
    gaps: tuple[str, ...] = field(default_factory=tuple)

    def to_record(self, row: list[CellValue]) -> dict[str, CellValue]:
        """Map one raw row onto its header names."""
        return {
            name: (row[idx] if idx < len(row) else None)
            for name, idx in self.columns.items()
        }

    def records(self, rows: list[list[CellValue]]) -> list[dict[str, CellValue]]:
        return [self.to_record(row) for row in rows]


def _first_occurrence_map(header: list[str]) -> dict[str, int]:
    columns: dict[str, int] = {}
    for idx, name in enumerate(header):
        if name and name not in columns:
            columns[name] = idx
    return columns


def resolve_target_schema(snapshot: TableSnapshot, job: JobSpec) -> TargetSchema:
    """
    Resolve every header the job writes to.

    Raises:
        MissingHeaderError: For the first required header not found
    """
    available = _first_occurrence_map(snapshot.header)
    columns: dict[str, int] = {}
    for name in job.required_target_fields:
        if name not in available:
            raise MissingHeaderError(snapshot.name, name)
        columns[name] = available[name]
    return TargetSchema(table=snapshot.name, columns=columns)


def resolve_source_schema(snapshot: TableSnapshot, job: JobSpec) -> SourceSchema:
    """
    Resolve the raw header row.

    Missing raw columns never stop a run. A missing copy source is written
    empty; a missing key field leaves every record without a key, so the
    whole target ends up flagged absent.
    """
    columns = _first_occurrence_map(snapshot.header)

    key_sources = job.required_source_fields
    gaps = list(dict.fromkeys(
        [name for name in key_sources if name not in columns]
        + [m.source_field for m in job.field_map if m.source_field not in columns]
    ))
    for name in gaps:
        if name in key_sources:
            logger.warning(
                'Job %s: key column "%s" not in "%s", no raw record will match',
                job.name,
                name,
                snapshot.name,
            )
        else:
            logger.warning(
                'Job %s: column "%s" not in "%s", writing empty values',
                job.name,
                name,
                snapshot.name,
            )
    return SourceSchema(table=snapshot.name, columns=columns, gaps=tuple(gaps))
