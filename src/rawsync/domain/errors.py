"""
Exception classes for reconciliation runs.

Configuration errors are fatal and always raised before the first cell
is written. Per-record and per-field problems (blank keys, raw columns
that do not exist) are not exceptions; they are skipped or filled with
empty values and reported in the run summary.
"""

from __future__ import annotations

from typing import Any


class RawSyncError(Exception):
    """
    Base exception for all rawsync errors.

    Attributes:
        message: Human-readable message
        details: Additional context (table, header, key...)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(RawSyncError):
    """A job cannot run against the workbook as configured."""


class TableNotFoundError(ConfigurationError):
    """Target or source table is missing (or the target has no cells at all)."""

    def __init__(self, table: str, reason: str = "not found"):
        self.table = table
        super().__init__(
            f'Sheet "{table}" {reason}.',
            details={"table": table},
        )


class MissingHeaderError(ConfigurationError):
    """A required header is absent from a table's header row."""

    def __init__(self, table: str, header: str):
        self.table = table
        self.header = header
        super().__init__(
            f'Header "{header}" missing in "{table}".',
            details={"table": table, "header": header},
        )


class DuplicateKeyError(ConfigurationError):
    """Target table holds the same key on more than one row."""

    def __init__(self, table: str, key: str, positions: list[int]):
        self.table = table
        self.key = key
        self.positions = positions
        super().__init__(
            f'Key "{key}" appears {len(positions)} times in "{table}" '
            f"(rows {', '.join(str(p) for p in positions)}).",
            details={"table": table, "key": key, "positions": positions},
        )
