"""
Key Builder - Record key extraction.

Builds the matching key for a raw record from the job's KeySpec.

Key Format:
    single field:   "EC-1042"
    composite:      "<part1><sep><part2>"      e.g. "CR-77-3"
    split-derived:  prefix of "100: Widget Line" -> "100"

A record whose key (or any sub-key) is empty after trimming is invalid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rawsync.domain.records import CellValue, Record, coerce_text

if TYPE_CHECKING:
    from rawsync.domain.job_spec import DerivedFieldSpec, KeyPart, KeySpec


@dataclass(frozen=True, slots=True)
class ExtractedKey:
    """
    A valid record key plus auxiliary values produced while building it.

    Attributes:
        key: Trimmed key text
        derived: Target field -> value for split remainders
    """

    key: str
    derived: dict[str, str] = field(default_factory=dict)


def split_on_first(value: str, delimiter: str) -> tuple[str, str]:
    """
    Split at the first ``delimiter``; both sides trimmed.

    Later delimiters stay in the remainder. No delimiter -> (value, "").
    """
    prefix, _, remainder = value.partition(delimiter)
    return prefix.strip(), remainder.strip()


def extract_part(record: Record, part: "KeyPart") -> str:
    """Trimmed sub-key text for one key part."""
    text = coerce_text(record.get(part.source_field))
    if part.delimiter:
        return split_on_first(text, part.delimiter)[0]
    return text.strip()


def derive_key(
    record: Record,
    key_spec: "KeySpec",
    derived_field: "DerivedFieldSpec | None" = None,
) -> ExtractedKey | None:
    """
    Build the key for one raw record.

    Args:
        record: Raw field -> value mapping
        key_spec: Key definition
        derived_field: Optional split remainder to surface

    Returns:
        ExtractedKey, or None when the record has no usable key
    """
    parts = [extract_part(record, p) for p in key_spec.parts]
    if not all(parts):
        return None

    derived: dict[str, str] = {}
    if derived_field is not None:
        text = coerce_text(record.get(derived_field.source_field))
        derived[derived_field.target_field] = split_on_first(text, derived_field.delimiter)[1]

    return ExtractedKey(key=key_spec.separator.join(parts), derived=derived)


def normalize_target_key(value: CellValue) -> str:
    """Key text as read back from the target key column."""
    return coerce_text(value).strip()
