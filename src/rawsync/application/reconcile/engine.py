"""
Reconciliation Engine - match raw records to target rows.

Decides, for every raw record, whether it updates an existing target row
or is appended as a new one, then recomputes the presence flag of every
target row. The engine only plans; ReconcileService applies the plan
through a TableStorage.

Run state lives in an explicit ReconcileState that each step receives
and mutates, so one step can be tested without a table:

    state = build_state(["A-1", "A-2"], first_data_position=2)
    write = reconcile_record(state, {"Key": "A-3"}, job)
    assert write.position == 4 and write.is_insert
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from rawsync.application.reconcile.key_builder import derive_key, normalize_target_key
from rawsync.application.reconcile.projection import project
from rawsync.domain.errors import DuplicateKeyError
from rawsync.domain.job_spec import DuplicateKeyPolicy, JobSpec
from rawsync.domain.records import CellValue, PresenceFlag, Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RowWrite:
    """
    Values to write at one target position.

    Attributes:
        key: Record key
        position: Target position (existing row or append slot)
        values: Target field -> value, written in order
        is_insert: True when the row is new (needs decoration)
    """

    key: str
    position: int
    values: dict[str, CellValue]
    is_insert: bool = False


@dataclass
class ReconcileState:
    """
    Run-local state threaded through reconcile_record.

    Attributes:
        index: Key -> target position
        seen_keys: Keys observed in the raw pass
        first_data_position: Position of the first target data row
        append_cursor: Next unused target position
        keys_by_position: Key text at every position below the cursor
        skipped_records: Raw records without a usable key
        processed_records: Raw records with a usable key
    """

    index: dict[str, int]
    first_data_position: int
    append_cursor: int
    keys_by_position: dict[int, str]
    seen_keys: set[str] = field(default_factory=set)
    skipped_records: int = 0
    processed_records: int = 0


@dataclass
class ReconcilePlan:
    """Everything one run must write, in order."""

    writes: list[RowWrite] = field(default_factory=list)
    flags: dict[int, PresenceFlag] = field(default_factory=dict)
    source_records: int = 0
    skipped_records: int = 0

    @property
    def inserted_positions(self) -> list[int]:
        return [w.position for w in self.writes if w.is_insert]

    @property
    def updated_positions(self) -> list[int]:
        """Distinct pre-existing positions touched by at least one write."""
        inserted = set(self.inserted_positions)
        return sorted({w.position for w in self.writes if w.position not in inserted})

    @property
    def flagged_present(self) -> int:
        return sum(1 for f in self.flags.values() if f is PresenceFlag.YES)

    @property
    def flagged_absent(self) -> int:
        return sum(1 for f in self.flags.values() if f is PresenceFlag.NO)


def build_state(
    target_keys: Sequence[CellValue],
    first_data_position: int,
    duplicate_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.FIRST,
    table: str = "",
) -> ReconcileState:
    """
    Index the target key column.

    Blank keys are not indexed but keep their position. When a key repeats,
    the lowest position wins, or DuplicateKeyError is raised under the
    REJECT policy.

    Args:
        target_keys: Key column values for every target data row
        first_data_position: Position of ``target_keys[0]``
        duplicate_policy: Handling of repeated keys
        table: Target table name, for messages

    Raises:
        DuplicateKeyError: Repeated key under DuplicateKeyPolicy.REJECT
    """
    index: dict[str, int] = {}
    keys_by_position: dict[int, str] = {}
    duplicates: dict[str, list[int]] = {}

    for offset, value in enumerate(target_keys):
        position = first_data_position + offset
        key = normalize_target_key(value)
        keys_by_position[position] = key
        if not key:
            continue
        if key in index:
            duplicates.setdefault(key, [index[key]]).append(position)
            continue
        index[key] = position

    for key, positions in duplicates.items():
        if duplicate_policy == DuplicateKeyPolicy.REJECT:
            raise DuplicateKeyError(table, key, positions)
        logger.warning(
            'Duplicate key "%s" in "%s" at rows %s; using row %d',
            key,
            table,
            positions,
            positions[0],
        )

    return ReconcileState(
        index=index,
        first_data_position=first_data_position,
        append_cursor=first_data_position + len(target_keys),
        keys_by_position=keys_by_position,
    )


def reconcile_record(state: ReconcileState, record: Record, job: JobSpec) -> RowWrite | None:
    """
    Route one raw record to its target position.

    Existing key -> update in place. New key -> append at the cursor,
    register it in the index and advance the cursor. The key field is
    always rewritten with the key text and the presence flag set to Yes.

    Returns:
        The RowWrite, or None when the record has no usable key
    """
    extracted = derive_key(record, job.key_spec, job.derived_field)
    if extracted is None:
        state.skipped_records += 1
        return None

    key = extracted.key
    state.processed_records += 1
    state.seen_keys.add(key)

    position = state.index.get(key)
    is_insert = position is None
    if is_insert:
        position = state.append_cursor
        state.index[key] = position
        state.keys_by_position[position] = key
        state.append_cursor += 1

    values = project(record, job.field_map)
    values.update(extracted.derived)
    values[job.key_spec.target_field] = key
    values[job.presence_flag_field] = PresenceFlag.YES.value

    return RowWrite(key=key, position=position, values=values, is_insert=is_insert)


def finalize_flags(state: ReconcileState) -> dict[int, PresenceFlag]:
    """
    Recompute the presence flag of every row below the append cursor.

    Flags are derived from scratch from ``seen_keys``, never from what
    the per-record steps wrote.
    """
    return {
        position: PresenceFlag.from_seen(
            state.keys_by_position.get(position, "") in state.seen_keys
        )
        for position in range(state.first_data_position, state.append_cursor)
    }


def plan_reconciliation(
    records: Iterable[Record],
    target_keys: Sequence[CellValue],
    job: JobSpec,
    first_data_position: int,
) -> ReconcilePlan:
    """
    Run the full raw pass and the flag sweep.

    Args:
        records: Raw records in source order
        target_keys: Current target key column
        job: Job definition
        first_data_position: Position of the first target data row

    Returns:
        ReconcilePlan with ordered writes and final flags
    """
    state = build_state(
        target_keys,
        first_data_position,
        job.duplicate_policy,
        table=job.target_table,
    )
    plan = ReconcilePlan()

    for record in records:
        plan.source_records += 1
        write = reconcile_record(state, record, job)
        if write is not None:
            plan.writes.append(write)

    plan.skipped_records = state.skipped_records
    if state.skipped_records:
        logger.debug(
            "Job %s: skipped %d raw rows without a key",
            job.name,
            state.skipped_records,
        )

    plan.flags = finalize_flags(state)

    logger.info(
        "Job %s: %d updated, %d appended, %d present, %d absent",
        job.name,
        len(plan.updated_positions),
        len(plan.inserted_positions),
        plan.flagged_present,
        plan.flagged_absent,
    )
    return plan
