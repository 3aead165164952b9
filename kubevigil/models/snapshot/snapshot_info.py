"""Baseline snapshot models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from kubevigil.models.core.instance_info import InstanceIdentity


class ExcludedCounts(BaseModel):
    """Instances left out of a snapshot, by reason."""

    model_config = ConfigDict(frozen=True)

    completed: int = 0
    failed: int = 0
    partially_ready: int = 0
    not_ready: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.failed + self.partially_ready + self.not_ready


class Snapshot(BaseModel):
    """Baseline of fully healthy instances captured on demand."""

    model_config = ConfigDict(frozen=True)

    name: str
    taken_at: datetime
    included_instances: frozenset[InstanceIdentity] = frozenset()
    excluded_counts: ExcludedCounts = ExcludedCounts()

    @property
    def included_count(self) -> int:
        return len(self.included_instances)


class SnapshotDiff(BaseModel):
    """Live population compared against the active snapshot."""

    model_config = ConfigDict(frozen=True)

    snapshot_name: str
    taken_at: datetime
    missing: tuple[InstanceIdentity, ...] = ()
    new_since_snapshot: tuple[InstanceIdentity, ...] = ()
    excluded_counts: ExcludedCounts = ExcludedCounts()

    @property
    def missing_count(self) -> int:
        return len(self.missing)

    @property
    def new_count(self) -> int:
        return len(self.new_since_snapshot)
