"""
Excel styling for reconciled sheets.

Only new rows are styled: the tracker's curated sheets carry their own
formatting, and appended rows get the same boxed look as the rest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from openpyxl.styles import Border, Side

if TYPE_CHECKING:
    from openpyxl.worksheet.worksheet import Worksheet


class Colors:
    """Palette (hex codes without #)."""

    BORDER = "000000"


class Borders:
    """Border styles."""

    CONTINUOUS = Side(style="thin", color=Colors.BORDER)

    # Outer edges + inside verticals of a one-row range
    NEW_ROW = Border(
        left=CONTINUOUS,
        right=CONTINUOUS,
        top=CONTINUOUS,
        bottom=CONTINUOUS,
    )


def apply_row_border(ws: "Worksheet", row: int, columns: Iterable[int]) -> None:
    """
    Box one row across ``columns`` (1-based).

    Every cell gets all four sides, which draws the top/bottom edges,
    the outer left/right edges and every inside vertical line.
    """
    for col in columns:
        ws.cell(row=row, column=col).border = Borders.NEW_ROW
