"""State store - single writer, many readers.

Writes are serialized with an ``asyncio.Lock``. Reads are lock-free: the
published view is an immutable object replaced wholesale on every publish,
so a reader always sees the result of exactly one completed cycle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from kubevigil.models.core.instance_info import InstanceObservation
from kubevigil.models.core.workload_info import WorkloadGroup
from kubevigil.models.state.aggregated_view import AggregatedView

if TYPE_CHECKING:
    from kubevigil.controllers.workloads.diff.lifecycle_ledger import LifecycleLedger
    from kubevigil.controllers.workloads.snapshot.baseline_manager import (
        BaselineManager,
    )

logger = logging.getLogger(__name__)


class StateStore:
    """Monitoring state of one domain between poll cycles."""

    def __init__(self, ledger: LifecycleLedger, baseline: BaselineManager) -> None:
        self._lock = asyncio.Lock()
        self._view: AggregatedView | None = None
        self._generation = 0
        self.ledger = ledger
        self.baseline = baseline
        self.observations_by_scope: dict[str, tuple[InstanceObservation, ...]] = {}
        self.previous_workloads: tuple[WorkloadGroup, ...] = ()
        self.completed_cycles = 0

    @property
    def view(self) -> AggregatedView | None:
        """Last published view (lock-free)."""
        return self._view

    @property
    def generation(self) -> int:
        return self._generation

    def all_observations(self) -> list[InstanceObservation]:
        """Last known observations across every scope."""
        return [
            observation
            for scope in sorted(self.observations_by_scope)
            for observation in self.observations_by_scope[scope]
        ]

    @asynccontextmanager
    async def writing(self) -> AsyncIterator[StateStore]:
        """Hold the write lock for a batch of mutations."""
        async with self._lock:
            yield self

    def publish_locked(self, view: AggregatedView) -> AggregatedView:
        """Stamp the next generation on ``view`` and make it current.

        Must be called while holding ``writing()``.
        """
        self._generation += 1
        published = view.model_copy(update={"generation": self._generation})
        self._view = published
        logger.debug("Published view generation %d", self._generation)
        return published

    async def publish(self, view: AggregatedView) -> AggregatedView:
        async with self._lock:
            return self.publish_locked(view)

    def reset_locked(self, *, keep_snapshot: bool = True) -> None:
        """Forget observations, history and the published view.

        Must be called while holding ``writing()``.
        """
        self.observations_by_scope = {}
        self.previous_workloads = ()
        self.completed_cycles = 0
        self.ledger.clear()
        if not keep_snapshot:
            self.baseline.clear_snapshot()
        self._view = None
