"""
Reconcile Package - raw -> target table synchronization.

Package Structure:
    service.py      - ReconcileService (main orchestrator)
    engine.py       - Update/insert routing and the presence-flag sweep
    key_builder.py  - Record key extraction (single, composite, split)
    projection.py   - Raw field -> target field copy rules

Usage:
    from rawsync.application.reconcile import ReconcileService

    summary = ReconcileService(storage).run(job)
"""

from rawsync.application.reconcile.service import (
    ReconcileService,
    ReconcileSummary,
    RunStatus,
)

__all__ = ["ReconcileService", "ReconcileSummary", "RunStatus"]
