"""
rawsync - Workbook sheet reconciliation.

Keeps manually curated sheets in sync with freshly refreshed "RAW" sheets:
rows are matched by key, updated in place or appended, and every row is
flagged with whether its key is still present in the raw data.

Usage:
    # CLI
    rawsync run tracker.xlsx --job ECs

    # Programmatic
    from rawsync import ReconcileService
    from rawsync.domain.job_registry import get_job
    from rawsync.infrastructure import WorkbookStorage

    storage = WorkbookStorage.open("tracker.xlsx")
    ReconcileService(storage).run(get_job("ECs"))
    storage.save()
"""

__version__ = "0.1.0"

from rawsync.application.reconcile import ReconcileService, ReconcileSummary

__all__ = ["ReconcileService", "ReconcileSummary", "__version__"]
