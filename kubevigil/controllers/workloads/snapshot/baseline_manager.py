"""Baseline snapshot manager - captures healthy instances and reports missing ones."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from kubevigil.constants.enums import InstanceStatus
from kubevigil.models.core.instance_info import InstanceIdentity, InstanceObservation
from kubevigil.models.snapshot.snapshot_info import ExcludedCounts, Snapshot, SnapshotDiff

logger = logging.getLogger(__name__)

SNAPSHOT_NAME_FORMAT = "Snapshot %Y-%m-%d %H:%M:%S"


class SnapshotError(Exception):
    """Raised when a snapshot cannot be taken, loaded or persisted."""


def default_snapshot_name(taken_at: datetime) -> str:
    return taken_at.strftime(SNAPSHOT_NAME_FORMAT)


def exclusion_reason(observation: InstanceObservation) -> str | None:
    """Why an instance would be left out of a snapshot, or None if it is included."""
    if observation.is_fully_ready:
        return None
    if observation.status == InstanceStatus.SUCCEEDED:
        return "completed"
    if observation.status == InstanceStatus.FAILED:
        return "failed"
    if observation.is_partially_ready:
        return "partially_ready"
    return "not_ready"


class BaselineManager:
    """Holds at most one active snapshot of fully ready instances."""

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def is_active(self) -> bool:
        return self._snapshot is not None

    def take_snapshot(
        self,
        name: str | None,
        observations: Iterable[InstanceObservation],
        taken_at: datetime,
    ) -> Snapshot:
        """Capture every Running, fully ready instance as the new baseline.

        Replaces any active snapshot. A blank name defaults to
        ``"Snapshot <timestamp>"``.
        """
        included: set[InstanceIdentity] = set()
        excluded = {"completed": 0, "failed": 0, "partially_ready": 0, "not_ready": 0}
        for observation in observations:
            reason = exclusion_reason(observation)
            if reason is None:
                included.add(observation.identity)
            else:
                excluded[reason] += 1

        snapshot = Snapshot(
            name=(name or "").strip() or default_snapshot_name(taken_at),
            taken_at=taken_at,
            included_instances=frozenset(included),
            excluded_counts=ExcludedCounts(**excluded),
        )
        if self._snapshot is not None:
            logger.info("Replacing snapshot %r", self._snapshot.name)
        self._snapshot = snapshot
        logger.info(
            "Snapshot %r taken: %d included, %d excluded",
            snapshot.name,
            snapshot.included_count,
            snapshot.excluded_counts.total,
        )
        return snapshot

    def restore(self, snapshot: Snapshot | None) -> None:
        """Install a previously persisted snapshot as the active one."""
        self._snapshot = snapshot

    def clear_snapshot(self) -> None:
        if self._snapshot is not None:
            logger.info("Snapshot %r cleared", self._snapshot.name)
        self._snapshot = None

    def diff_against_snapshot(
        self, observations: Iterable[InstanceObservation]
    ) -> SnapshotDiff | None:
        """Compare live observations with the active snapshot.

        An included instance is missing whenever it is not currently Running
        and fully ready, whether or not a deletion was recorded for it.
        """
        snapshot = self._snapshot
        if snapshot is None:
            return None

        healthy_now: set[InstanceIdentity] = set()
        present_now: set[InstanceIdentity] = set()
        for observation in observations:
            present_now.add(observation.identity)
            if observation.is_fully_ready:
                healthy_now.add(observation.identity)

        def _ordered(identities: Iterable[InstanceIdentity]) -> tuple[InstanceIdentity, ...]:
            return tuple(sorted(identities, key=lambda ident: (ident.namespace, ident.name)))

        return SnapshotDiff(
            snapshot_name=snapshot.name,
            taken_at=snapshot.taken_at,
            missing=_ordered(snapshot.included_instances - healthy_now),
            new_since_snapshot=_ordered(present_now - snapshot.included_instances),
            excluded_counts=snapshot.excluded_counts,
        )
