"""Whole-catalog invariant checks with automatic repair."""

from __future__ import annotations

from .engine import run_integrity_maintenance, run_pass
from .passes import DEFAULT_PASSES, MaintenancePass
from .report import PassReport, PassStatus

__all__ = [
    "DEFAULT_PASSES",
    "MaintenancePass",
    "PassReport",
    "PassStatus",
    "run_integrity_maintenance",
    "run_pass",
]
