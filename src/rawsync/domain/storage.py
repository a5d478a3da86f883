"""
Storage collaborator interface.

The reconciliation core never touches cells directly. It reads table
snapshots and issues writes/decorations through a TableStorage, which
the infrastructure layer implements for openpyxl workbooks and for
plain in-memory tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from rawsync.domain.records import CellValue


@dataclass(frozen=True, slots=True)
class ColumnSpan:
    """Columns covered by a table, in storage coordinates."""

    start: int
    width: int

    @property
    def stop(self) -> int:
        """One past the last column."""
        return self.start + self.width

    def __iter__(self):
        return iter(range(self.start, self.stop))


@dataclass(frozen=True)
class TableSnapshot:
    """
    Header and data rows of one table as read at run start.

    Attributes:
        name: Table (sheet) name
        header: Trimmed header texts, left to right
        rows: Data rows, each aligned with ``header``
        first_data_position: Storage position of ``rows[0]``
        column_span: Full column span, used for new-row decoration
    """

    name: str
    header: list[str]
    rows: list[list[CellValue]] = field(default_factory=list)
    first_data_position: int = 1
    column_span: ColumnSpan = ColumnSpan(0, 0)

    @property
    def is_empty(self) -> bool:
        return not self.rows


class TableStorage(Protocol):
    """
    Protocol for the tabular medium a job reads from and writes to.

    Columns are addressed by their offset in ``TableSnapshot.header``, as
    resolved once per run by ``rawsync.domain.schema``.
    """

    def read_table(self, name: str) -> TableSnapshot | None:
        """Return the table snapshot, or None when no such table exists."""
        ...

    def read_column(self, table: str, column: int) -> Sequence[CellValue]:
        """Data values of the column at header offset ``column``."""
        ...

    def write_cell(self, table: str, position: int, column: int, value: CellValue) -> bool:
        """Write one cell; return True when the stored value changed."""
        ...

    def decorate_row(self, table: str, position: int, column_span: ColumnSpan) -> None:
        """Apply the new-row border treatment across ``column_span``."""
        ...
