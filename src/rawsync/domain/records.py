"""
Record and cell value types shared by every reconciliation stage.

Architecture Note:
    This is a pure domain module with NO external dependencies.
    It should only contain enums, type aliases and value helpers.
"""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Mapping, Union

# None is the "empty" cell
CellValue = Union[str, int, float, bool, datetime, date, time, None]

# Ordered field name -> value mapping for one row
Record = Mapping[str, CellValue]


class PresenceFlag(str, Enum):
    """
    Whether a target row's key was present in the latest raw refresh.

    Always write ``flag.value`` to storage, never the member itself.
    """

    YES = "Yes"
    NO = "No"

    @classmethod
    def from_seen(cls, seen: bool) -> PresenceFlag:
        return cls.YES if seen else cls.NO


def coerce_text(value: CellValue) -> str:
    """
    Convert a cell value to the text used for key matching.

    - None -> ""
    - booleans -> "true" / "false"
    - integral floats lose their ".0" (100.0 -> "100")
    - dates and times -> ISO format

    The result is NOT stripped; callers trim where the key rules say so.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def cells_equal(current: CellValue, new: CellValue) -> bool:
    """
    Compare a stored cell value with a value about to be written.

    Empty string and None are the same empty cell. Numbers compare by
    value (1 == 1.0) but never equal a bool.
    """
    if current in ("", None) and new in ("", None):
        return True
    if isinstance(current, bool) or isinstance(new, bool):
        return type(current) is type(new) and current == new
    if isinstance(current, (int, float)) and isinstance(new, (int, float)):
        return current == new
    return type(current) is type(new) and current == new
