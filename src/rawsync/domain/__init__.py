"""
Domain package.

Pure types for reconciliation jobs: job specs, records, presence flags,
header schemas, the storage protocol and the error hierarchy.
"""

from rawsync.domain.errors import (
    ConfigurationError,
    DuplicateKeyError,
    MissingHeaderError,
    RawSyncError,
    TableNotFoundError,
)
from rawsync.domain.job_spec import (
    DerivedFieldSpec,
    DuplicateKeyPolicy,
    FieldMapping,
    JobSpec,
    KeyPart,
    KeySpec,
)
from rawsync.domain.records import CellValue, PresenceFlag, Record, coerce_text
from rawsync.domain.storage import ColumnSpan, TableSnapshot, TableStorage

__all__ = [
    "CellValue",
    "ColumnSpan",
    "ConfigurationError",
    "DerivedFieldSpec",
    "DuplicateKeyError",
    "DuplicateKeyPolicy",
    "FieldMapping",
    "JobSpec",
    "KeyPart",
    "KeySpec",
    "MissingHeaderError",
    "PresenceFlag",
    "RawSyncError",
    "Record",
    "TableNotFoundError",
    "TableSnapshot",
    "TableStorage",
    "coerce_text",
]
