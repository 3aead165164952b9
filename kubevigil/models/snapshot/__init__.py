"""Baseline snapshot models."""

from kubevigil.models.snapshot.snapshot_info import ExcludedCounts, Snapshot, SnapshotDiff

__all__ = ["ExcludedCounts", "Snapshot", "SnapshotDiff"]
