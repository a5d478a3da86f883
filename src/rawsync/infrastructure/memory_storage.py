"""
In-memory TableStorage.

Tables are a header list plus row lists. Position 0 is the header row,
data starts at position 1. Decorations are recorded, not rendered, so
tests can assert on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from rawsync.domain.errors import TableNotFoundError
from rawsync.domain.records import CellValue, cells_equal
from rawsync.domain.storage import ColumnSpan, TableSnapshot


@dataclass
class MemoryTable:
    header: list[str]
    rows: list[list[CellValue]] = field(default_factory=list)
    decorated: list[tuple[int, ColumnSpan]] = field(default_factory=list)

    def column(self, idx: int) -> list[CellValue]:
        return [row[idx] if idx < len(row) else None for row in self.rows]


class InMemoryStorage:
    """
    Dict-backed TableStorage.

    Usage:
        storage = InMemoryStorage()
        storage.add_table("Target", ["Key", "Value", "In Raw?"], [["A-1", "old", "Yes"]])
    """

    def __init__(self) -> None:
        self.tables: dict[str, MemoryTable] = {}

    def add_table(
        self,
        name: str,
        header: list[str],
        rows: list[list[CellValue]] | None = None,
    ) -> MemoryTable:
        """Register a table; header texts are trimmed like a sheet header row."""
        table = MemoryTable(
            header=[str(h).strip() if h is not None else "" for h in header],
            rows=[list(r) + [None] * (len(header) - len(r)) for r in rows or []],
        )
        self.tables[name] = table
        return table

    def _table(self, name: str) -> MemoryTable:
        if name not in self.tables:
            raise TableNotFoundError(name)
        return self.tables[name]

    def _check_column(self, table: str, column: int) -> MemoryTable:
        t = self._table(table)
        if not 0 <= column < len(t.header):
            raise IndexError(f"Column {column} is outside {table} ({len(t.header)} columns)")
        return t

    def read_table(self, name: str) -> TableSnapshot | None:
        table = self.tables.get(name)
        if table is None:
            return None
        return TableSnapshot(
            name=name,
            header=list(table.header),
            rows=[list(r) for r in table.rows],
            first_data_position=1,
            column_span=ColumnSpan(0, len(table.header)),
        )

    def read_column(self, table: str, column: int) -> Sequence[CellValue]:
        return self._check_column(table, column).column(column)

    def write_cell(self, table: str, position: int, column: int, value: CellValue) -> bool:
        t = self._check_column(table, column)
        if position < 1:
            raise ValueError(f"Position {position} is the header row of {table}")

        row_idx = position - 1
        while len(t.rows) <= row_idx:
            t.rows.append([None] * len(t.header))
        if cells_equal(t.rows[row_idx][column], value):
            return False
        t.rows[row_idx][column] = value
        return True

    def decorate_row(self, table: str, position: int, column_span: ColumnSpan) -> None:
        self._table(table).decorated.append((position, column_span))
