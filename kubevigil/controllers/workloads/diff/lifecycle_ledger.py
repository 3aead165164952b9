"""Lifecycle ledger - append-only per-instance event history."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from kubevigil.constants.enums import (
    InstanceLifecycleState,
    InstanceStatus,
    LifecycleEventKind,
)
from kubevigil.constants.limits import MAX_EVENTS_DISPLAY
from kubevigil.models.core.instance_info import InstanceIdentity, InstanceObservation
from kubevigil.models.events.lifecycle_event import InstanceHistory, LifecycleEvent

logger = logging.getLogger(__name__)


@dataclass
class _SlotRecord:
    """Mutable bookkeeping for one name slot."""

    identity: InstanceIdentity
    events: list[LifecycleEvent] = field(default_factory=list)
    seen_keys: set[tuple] = field(default_factory=set)
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    current_status: InstanceStatus | None = None
    deleted_at: datetime | None = None
    restart_count: int = 0
    incarnations: set[datetime] = field(default_factory=set)


class LifecycleLedger:
    """Records lifecycle events per name slot.

    ``record`` is idempotent: an event already in the ledger is not appended
    again. History grows until ``trim`` is called.
    """

    def __init__(self, recent_limit: int = MAX_EVENTS_DISPLAY) -> None:
        self._slots: dict[InstanceIdentity, _SlotRecord] = {}
        self._recent: deque[LifecycleEvent] = deque(maxlen=max(0, recent_limit))

    def __len__(self) -> int:
        return sum(len(slot.events) for slot in self._slots.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._slots

    @property
    def identities(self) -> list[InstanceIdentity]:
        return list(self._slots)

    def _slot(self, identity: InstanceIdentity) -> _SlotRecord:
        slot = self._slots.get(identity)
        if slot is None:
            slot = _SlotRecord(identity=identity)
            self._slots[identity] = slot
        return slot

    def record(self, events: Iterable[LifecycleEvent]) -> list[LifecycleEvent]:
        """Append events not yet recorded and return the ones appended."""
        appended = []
        for event in events:
            slot = self._slot(event.identity)
            key = event.dedup_key
            if key in slot.seen_keys:
                continue
            slot.seen_keys.add(key)
            slot.events.append(event)
            self._apply(slot, event)
            self._recent.append(event)
            appended.append(event)
        if appended:
            logger.debug("Recorded %d lifecycle events", len(appended))
        return appended

    def _apply(self, slot: _SlotRecord, event: LifecycleEvent) -> None:
        if event.kind == LifecycleEventKind.CREATED:
            slot.deleted_at = None
            slot.current_status = event.new_status
            slot.restart_count = event.restart_count
            if event.first_seen is not None:
                slot.incarnations.add(event.first_seen)
                if slot.first_seen is None or event.first_seen < slot.first_seen:
                    slot.first_seen = event.first_seen
        elif event.kind == LifecycleEventKind.DELETED:
            slot.deleted_at = event.timestamp
        else:
            slot.current_status = event.new_status
            slot.restart_count = max(slot.restart_count, event.restart_count)

    def observe(self, observations: Iterable[InstanceObservation]) -> None:
        """Refresh last-seen bookkeeping from the observations of a cycle."""
        for observation in observations:
            slot = self._slot(observation.identity)
            slot.last_seen = observation.last_seen
            slot.current_status = observation.status
            slot.restart_count = observation.restart_count
            slot.incarnations.add(observation.first_seen)
            if slot.first_seen is None or observation.first_seen < slot.first_seen:
                slot.first_seen = observation.first_seen

    def history(
        self,
        identity: InstanceIdentity,
        lifecycle_state: InstanceLifecycleState | None = None,
    ) -> InstanceHistory | None:
        """History of one name slot, or None if it was never seen."""
        slot = self._slots.get(identity)
        if slot is None:
            return None
        if lifecycle_state is None:
            lifecycle_state = (
                InstanceLifecycleState.DELETED
                if slot.deleted_at is not None
                else InstanceLifecycleState.ACTIVE
            )
        return InstanceHistory(
            identity=identity,
            events=tuple(slot.events),
            first_seen=slot.first_seen,
            last_seen=slot.last_seen,
            current_status=slot.current_status,
            lifecycle_state=lifecycle_state,
            deleted_at=slot.deleted_at,
            restart_count=slot.restart_count,
            incarnations=len(slot.incarnations),
        )

    def recent_events(self, limit: int | None = None) -> tuple[LifecycleEvent, ...]:
        """Most recently recorded events, oldest first."""
        events = tuple(self._recent)
        if limit is not None:
            events = events[-limit:] if limit > 0 else ()
        return events

    def trim(self, max_events_per_instance: int | None) -> int:
        """Drop the oldest events beyond the per-instance cap.

        Returns:
            Number of events removed.
        """
        if max_events_per_instance is None:
            return 0
        removed = 0
        for slot in self._slots.values():
            excess = len(slot.events) - max_events_per_instance
            if excess <= 0:
                continue
            for event in slot.events[:excess]:
                slot.seen_keys.discard(event.dedup_key)
            del slot.events[:excess]
            removed += excess
        if removed:
            logger.debug("Trimmed %d lifecycle events", removed)
        return removed

    def clear(self) -> None:
        self._slots.clear()
        self._recent.clear()
