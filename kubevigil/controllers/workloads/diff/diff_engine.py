"""Poll-to-poll diff engine - derives lifecycle events from two observation sets.

The diff is a pure function of (previous, current, timestamp). Running it
twice on the same inputs yields the same events in the same order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from kubevigil.constants.enums import LifecycleEventKind
from kubevigil.models.core.instance_info import InstanceIdentity, InstanceObservation
from kubevigil.models.events.lifecycle_event import LifecycleEvent

logger = logging.getLogger(__name__)


def index_observations(
    observations: Iterable[InstanceObservation],
) -> dict[InstanceIdentity, InstanceObservation]:
    """Index observations by name slot; a later duplicate replaces an earlier one."""
    indexed: dict[InstanceIdentity, InstanceObservation] = {}
    for observation in observations:
        identity = observation.identity
        if identity in indexed:
            logger.debug("Duplicate observation for %s, keeping the latest", identity)
        indexed[identity] = observation
    return indexed


def _created(observation: InstanceObservation, timestamp: datetime) -> LifecycleEvent:
    return LifecycleEvent(
        identity=observation.identity,
        kind=LifecycleEventKind.CREATED,
        timestamp=timestamp,
        new_status=observation.status,
        restart_count=observation.restart_count,
        first_seen=observation.first_seen,
    )


def _deleted(observation: InstanceObservation, timestamp: datetime) -> LifecycleEvent:
    return LifecycleEvent(
        identity=observation.identity,
        kind=LifecycleEventKind.DELETED,
        timestamp=timestamp,
        previous_status=observation.status,
        restart_count=observation.restart_count,
        first_seen=observation.first_seen,
    )


def diff_instance(
    before: InstanceObservation | None,
    after: InstanceObservation | None,
    timestamp: datetime,
) -> list[LifecycleEvent]:
    """Events for one name slot between two polls.

    A changed ``first_seen`` means the name was reused by a new instance and
    is reported as the old incarnation's deletion followed by the new one's
    creation. Otherwise a status change is reported before a restart.
    """
    if before is None and after is None:
        return []
    if before is None:
        return [_created(after, timestamp)]
    if after is None:
        return [_deleted(before, timestamp)]
    if before.first_seen != after.first_seen:
        return [_deleted(before, timestamp), _created(after, timestamp)]

    events = []
    if before.status != after.status:
        events.append(
            LifecycleEvent(
                identity=after.identity,
                kind=LifecycleEventKind.STATUS_CHANGE,
                timestamp=timestamp,
                previous_status=before.status,
                new_status=after.status,
                restart_count=after.restart_count,
                first_seen=after.first_seen,
            )
        )
    if after.restart_count > before.restart_count:
        events.append(
            LifecycleEvent(
                identity=after.identity,
                kind=LifecycleEventKind.RESTART,
                timestamp=timestamp,
                previous_status=before.status,
                new_status=after.status,
                restart_count=after.restart_count,
                first_seen=after.first_seen,
            )
        )
    return events


def diff_observations(
    previous: Iterable[InstanceObservation],
    current: Iterable[InstanceObservation],
    timestamp: datetime,
) -> tuple[LifecycleEvent, ...]:
    """All lifecycle events between two polls, ordered by namespace and name."""
    before = index_observations(previous)
    after = index_observations(current)

    events: list[LifecycleEvent] = []
    for identity in sorted(
        before.keys() | after.keys(), key=lambda ident: (ident.namespace, ident.name)
    ):
        events.extend(diff_instance(before.get(identity), after.get(identity), timestamp))
    return tuple(events)
