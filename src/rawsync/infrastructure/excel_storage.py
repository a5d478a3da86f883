"""
Workbook Storage - TableStorage over an openpyxl workbook.

A table is a worksheet. Its used range is the bounding box of cells
holding a value; the first row of that range is the header row.
Positions are 1-based sheet row numbers and column spans are 1-based
sheet columns, so every position can be read straight off Excel.

Formula cells are read through the values Excel cached on last save
(a second, data_only copy of the workbook). Cells written during the
session are read as written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from openpyxl import Workbook, load_workbook

from rawsync.domain.errors import TableNotFoundError
from rawsync.domain.records import CellValue, cells_equal
from rawsync.domain.storage import ColumnSpan, TableSnapshot
from rawsync.infrastructure.excel_styles import apply_row_border

if TYPE_CHECKING:
    from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)


def _is_formula(value: object) -> bool:
    return isinstance(value, str) and value.startswith("=")


def used_bounds(ws: "Worksheet") -> tuple[int, int, int, int] | None:
    """
    Bounding box of cells holding a value.

    Returns:
        (min_row, min_col, max_row, max_col), or None for a blank sheet
    """
    rows: list[int] = []
    cols: list[int] = []
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is not None and cell.value != "":
                rows.append(cell.row)
                cols.append(cell.column)
    if not rows:
        return None
    return min(rows), min(cols), max(rows), max(cols)


class WorkbookStorage:
    """
    TableStorage implementation for .xlsx workbooks.

    Usage:
        storage = WorkbookStorage.open("tracker.xlsx")
        ...
        storage.save()
    """

    def __init__(
        self,
        workbook: Workbook,
        path: Path | None = None,
        cached_values: Workbook | None = None,
    ) -> None:
        self.workbook = workbook
        self.path = path
        self._cached_values = cached_values
        # table -> (header row, column span)
        self._layouts: dict[str, tuple[int, ColumnSpan]] = {}

    @classmethod
    def open(cls, path: Path | str) -> "WorkbookStorage":
        """
        Load a workbook from disk.

        Raises:
            FileNotFoundError: If the workbook does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {path}")

        logger.info("Opening workbook %s", path)
        workbook = load_workbook(path)
        cached = load_workbook(path, data_only=True)
        return cls(workbook, path=path, cached_values=cached)

    def save(self, path: Path | str | None = None) -> Path:
        """
        Write the workbook back to disk.

        Raises:
            PermissionError: If the file is open in Excel
            ValueError: If no path is known
        """
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("No path to save the workbook to")
        try:
            self.workbook.save(target)
        except PermissionError as e:
            raise PermissionError(
                f"Cannot write to '{target.name}' - file is open! Close Excel and retry."
            ) from e
        logger.info("Saved workbook %s", target)
        return target

    def close(self) -> None:
        self.workbook.close()
        if self._cached_values is not None:
            self._cached_values.close()

    # ─────────────────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────────────────

    def _worksheet(self, table: str) -> "Worksheet":
        if table not in self.workbook.sheetnames:
            raise TableNotFoundError(table)
        return self.workbook[table]

    def _value(self, ws: "Worksheet", row: int, col: int) -> CellValue:
        value = ws.cell(row=row, column=col).value
        if _is_formula(value) and self._cached_values is not None:
            if ws.title in self._cached_values.sheetnames:
                return self._cached_values[ws.title].cell(row=row, column=col).value
        return value

    def read_table(self, name: str) -> TableSnapshot | None:
        if name not in self.workbook.sheetnames:
            return None
        ws = self.workbook[name]

        bounds = used_bounds(ws)
        if bounds is None:
            logger.debug('Sheet "%s" is blank', name)
            return TableSnapshot(name=name, header=[])

        min_row, min_col, max_row, max_col = bounds
        header = [
            "" if v is None else str(v).strip()
            for v in (self._value(ws, min_row, c) for c in range(min_col, max_col + 1))
        ]
        rows = [
            [self._value(ws, r, c) for c in range(min_col, max_col + 1)]
            for r in range(min_row + 1, max_row + 1)
        ]
        span = ColumnSpan(min_col, max_col - min_col + 1)
        self._layouts[name] = (min_row, span)

        return TableSnapshot(
            name=name,
            header=header,
            rows=rows,
            first_data_position=min_row + 1,
            column_span=span,
        )

    def _sheet_column(self, table: str, column: int) -> int:
        """Header offset -> 1-based sheet column."""
        if table not in self._layouts and self.read_table(table) is None:
            raise TableNotFoundError(table)
        layout = self._layouts.get(table)
        if layout is None or not 0 <= column < layout[1].width:
            raise IndexError(f'Column {column} is outside the used range of "{table}"')
        return layout[1].start + column

    def read_column(self, table: str, column: int) -> Sequence[CellValue]:
        ws = self._worksheet(table)
        col = self._sheet_column(table, column)
        header_row = self._layouts[table][0]
        bounds = used_bounds(ws)
        return [self._value(ws, r, col) for r in range(header_row + 1, bounds[2] + 1)]

    # ─────────────────────────────────────────────────────────────────────
    # Writing
    # ─────────────────────────────────────────────────────────────────────

    def write_cell(self, table: str, position: int, column: int, value: CellValue) -> bool:
        ws = self._worksheet(table)
        col = self._sheet_column(table, column)
        cell = ws.cell(row=position, column=col)
        current = self._value(ws, position, col)
        if cells_equal(current, value) and not _is_formula(cell.value):
            return False
        cell.value = None if value == "" else value
        return True

    def decorate_row(self, table: str, position: int, column_span: ColumnSpan) -> None:
        apply_row_border(self._worksheet(table), position, column_span)
