"""Baseline snapshots for the workload monitor."""

from kubevigil.controllers.workloads.snapshot.baseline_manager import (
    BaselineManager,
    SnapshotError,
    default_snapshot_name,
    exclusion_reason,
)
from kubevigil.controllers.workloads.snapshot.snapshot_store import SnapshotStore

__all__ = [
    "BaselineManager",
    "SnapshotError",
    "SnapshotStore",
    "default_snapshot_name",
    "exclusion_reason",
]
