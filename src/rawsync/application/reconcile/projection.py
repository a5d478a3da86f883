"""
Projection - copy rules from raw fields to target fields.
"""

from __future__ import annotations

from typing import Iterable

from rawsync.domain.job_spec import FieldMapping
from rawsync.domain.records import CellValue, Record


def project(record: Record, field_map: Iterable[FieldMapping]) -> dict[str, CellValue]:
    """
    Compute the target values for one raw record.

    Values are copied unchanged (numbers stay numbers, dates stay dates).
    A source field the raw schema does not have yields None.

    Returns:
        Target field -> value, in field_map declaration order
    """
    return {
        m.target_field: record[m.source_field] if m.source_field in record else None
        for m in field_map
    }
