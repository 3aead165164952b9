"""Workload transition detector - significant workload changes between cycles."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Collection, Iterable
from datetime import datetime

from kubevigil.constants.enums import LifecycleEventKind, Severity, WorkloadTransitionKind
from kubevigil.models.core.instance_info import InstanceIdentity
from kubevigil.models.core.workload_info import WorkloadGroup, WorkloadIdentity
from kubevigil.models.events.lifecycle_event import LifecycleEvent
from kubevigil.models.events.workload_transition import (
    NamespaceDisappearance,
    WorkloadTransition,
)

logger = logging.getLogger(__name__)


def classify_transition(
    previous: WorkloadGroup, current: WorkloadGroup
) -> tuple[WorkloadTransitionKind, str] | None:
    """Compare one workload across two cycles.

    Returns the transition kind and a short reason, or None when nothing
    significant changed. Checked in order: recovered, degraded, failed.
    """
    if current.total > 0 and current.ready == current.total and (
        previous.ready == 0 or previous.severity == Severity.CRITICAL
    ):
        return WorkloadTransitionKind.RECOVERED, "all instances ready again"
    if 0 < current.ready < current.total and previous.ready >= previous.total:
        return (
            WorkloadTransitionKind.DEGRADED,
            f"{current.ready}/{current.total} instances ready",
        )
    if current.ready == 0 and current.total > 0 and previous.ready > 0:
        return WorkloadTransitionKind.FAILED, "no instance ready"
    return None


def detect_workload_transitions(
    previous: Iterable[WorkloadGroup],
    current: Iterable[WorkloadGroup],
    timestamp: datetime,
    *,
    first_cycle: bool = False,
) -> tuple[WorkloadTransition, ...]:
    """Transitions of every workload between the previous and current cycle.

    Workloads that appear on the first cycle are not reported as started.
    A workload that vanished is reported as stopped only if it had at least
    one ready instance.
    """
    before: dict[WorkloadIdentity, WorkloadGroup] = {g.identity: g for g in previous}
    after: dict[WorkloadIdentity, WorkloadGroup] = {g.identity: g for g in current}

    transitions: list[WorkloadTransition] = []
    for identity in sorted(
        before.keys() | after.keys(),
        key=lambda ident: (ident.namespace, ident.workload_name, ident.kind.value),
    ):
        old = before.get(identity)
        new = after.get(identity)
        if old is None and new is not None:
            if first_cycle:
                continue
            transitions.append(
                WorkloadTransition(
                    identity=identity,
                    kind=WorkloadTransitionKind.STARTED,
                    timestamp=timestamp,
                    current_ready=new.ready,
                    current_total=new.total,
                    reason="new workload",
                )
            )
        elif old is not None and new is None:
            if old.ready > 0:
                transitions.append(
                    WorkloadTransition(
                        identity=identity,
                        kind=WorkloadTransitionKind.STOPPED,
                        timestamp=timestamp,
                        previous_ready=old.ready,
                        reason="workload completely removed",
                    )
                )
        elif old is not None and new is not None:
            classified = classify_transition(old, new)
            if classified is None:
                continue
            kind, reason = classified
            transitions.append(
                WorkloadTransition(
                    identity=identity,
                    kind=kind,
                    timestamp=timestamp,
                    previous_ready=old.ready,
                    current_ready=new.ready,
                    current_total=new.total,
                    reason=reason,
                )
            )

    if transitions:
        logger.info("Detected %d workload transitions", len(transitions))
    return tuple(transitions)


def detect_mass_disappearance(
    events: Iterable[LifecycleEvent],
    threshold: int,
    timestamp: datetime,
    still_present: Collection[InstanceIdentity] = (),
) -> tuple[NamespaceDisappearance, ...]:
    """Namespaces in which at least ``threshold`` instances were deleted at once.

    Deletions of names that are present again (name reuse) do not count.
    """
    deleted_by_namespace: dict[str, list[LifecycleEvent]] = defaultdict(list)
    for event in events:
        if (
            event.kind == LifecycleEventKind.DELETED
            and event.identity not in still_present
        ):
            deleted_by_namespace[event.identity.namespace].append(event)

    disappearances = []
    for namespace in sorted(deleted_by_namespace):
        deleted = deleted_by_namespace[namespace]
        if len(deleted) < threshold:
            continue
        logger.warning(
            "Mass disappearance in namespace %s: %d instances gone",
            namespace,
            len(deleted),
        )
        disappearances.append(
            NamespaceDisappearance(
                namespace=namespace,
                timestamp=timestamp,
                instances=tuple(event.identity for event in deleted),
                last_statuses=tuple(event.previous_status for event in deleted),
            )
        )
    return tuple(disappearances)
