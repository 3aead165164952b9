"""Workload aggregator - groups observations by workload and computes statistics."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping

from kubevigil.constants.enums import (
    InstanceLifecycleState,
    InstanceStatus,
    RiskLevel,
    Severity,
    Stability,
)
from kubevigil.controllers.workloads.parsers.name_resolver import (
    needs_review,
    resolve_workload_identity,
)
from kubevigil.controllers.workloads.scoring.health_scorer import (
    namespace_health,
    score_group,
)
from kubevigil.controllers.workloads.scoring.pattern_analyzer import analyze_group
from kubevigil.models.core.instance_info import InstanceObservation
from kubevigil.models.core.workload_info import WorkloadGroup, WorkloadIdentity
from kubevigil.models.state.aggregated_view import GlobalStatistics, NamespaceSummary

logger = logging.getLogger(__name__)


def _group_sort_key(identity: WorkloadIdentity) -> tuple[str, str, str]:
    return (identity.namespace, identity.workload_name, identity.kind.value)


def build_group(
    identity: WorkloadIdentity, members: Iterable[InstanceObservation]
) -> WorkloadGroup:
    """Count one workload's members, score them and analyze their patterns."""
    ordered = tuple(sorted(members, key=lambda obs: obs.name))
    statuses = Counter(obs.status for obs in ordered)
    group = WorkloadGroup(
        identity=identity,
        members=ordered,
        total=len(ordered),
        running=statuses[InstanceStatus.RUNNING],
        pending=statuses[InstanceStatus.PENDING],
        failed=statuses[InstanceStatus.FAILED],
        succeeded=statuses[InstanceStatus.SUCCEEDED],
        unknown=statuses[InstanceStatus.UNKNOWN],
        ready=sum(1 for obs in ordered if obs.is_fully_ready),
        container_ready_total=sum(obs.ready_containers for obs in ordered),
        container_expected_total=sum(obs.total_containers for obs in ordered),
        needs_review=any(
            needs_review(obs.name, obs.workload_kind_hint) for obs in ordered
        ),
    )
    return analyze_group(score_group(group))


def aggregate_workloads(
    observations: Iterable[InstanceObservation],
) -> tuple[WorkloadGroup, ...]:
    """Partition observations into scored workload groups.

    Groups are rebuilt from scratch on every call and returned ordered by
    namespace, workload name and kind.
    """
    buckets: dict[WorkloadIdentity, list[InstanceObservation]] = defaultdict(list)
    for observation in observations:
        buckets[resolve_workload_identity(observation)].append(observation)

    groups = tuple(
        build_group(identity, buckets[identity])
        for identity in sorted(buckets, key=_group_sort_key)
    )
    flagged = sum(1 for group in groups if group.needs_review)
    if flagged:
        logger.debug("%d workload groups need naming review", flagged)
    return groups


def summarize_namespaces(
    observations: Iterable[InstanceObservation],
    namespaces: Iterable[str] = (),
) -> tuple[NamespaceSummary, ...]:
    """Ready ratio per namespace.

    Namespaces listed in ``namespaces`` but without observations are reported
    as empty, which counts as healthy.
    """
    totals: Counter[str] = Counter()
    ready: Counter[str] = Counter()
    for observation in observations:
        totals[observation.namespace] += 1
        if observation.is_fully_ready:
            ready[observation.namespace] += 1

    summaries = []
    for namespace in sorted(set(totals) | set(namespaces)):
        pct, status = namespace_health(totals[namespace], ready[namespace])
        summaries.append(
            NamespaceSummary(
                namespace=namespace,
                total=totals[namespace],
                ready=ready[namespace],
                health_pct=pct,
                status=status,
            )
        )
    return tuple(summaries)


def build_statistics(
    observations: Iterable[InstanceObservation],
    groups: Iterable[WorkloadGroup],
    *,
    malformed_count: int = 0,
    instance_states: Mapping[str, InstanceLifecycleState] | None = None,
    namespaces: Iterable[str] = (),
) -> GlobalStatistics:
    """Domain-wide counts for one cycle."""
    observations = list(observations)
    groups = list(groups)
    statuses = Counter(obs.status for obs in observations)
    severities = Counter(group.severity for group in groups)
    risks = Counter(group.risk for group in groups)
    states = Counter((instance_states or {}).values())

    return GlobalStatistics(
        total_instances=len(observations),
        running=statuses[InstanceStatus.RUNNING],
        pending=statuses[InstanceStatus.PENDING],
        failed=statuses[InstanceStatus.FAILED],
        succeeded=statuses[InstanceStatus.SUCCEEDED],
        unknown=statuses[InstanceStatus.UNKNOWN],
        ready=sum(1 for obs in observations if obs.is_fully_ready),
        total_restarts=sum(obs.restart_count for obs in observations),
        workloads=sum(1 for group in groups if not group.is_standalone),
        standalone_instances=sum(1 for group in groups if group.is_standalone),
        workloads_by_severity={
            severity: severities[severity] for severity in Severity
        },
        needs_review_workloads=sum(1 for group in groups if group.needs_review),
        malformed_observations=malformed_count,
        deleted_instances=states[InstanceLifecycleState.DELETED],
        missing_since_baseline=states[InstanceLifecycleState.MISSING_SINCE_BASELINE],
        stuck_instances=sum(1 for obs in observations if obs.is_stuck),
        unstable_workloads=sum(
            1 for group in groups if group.stability == Stability.UNSTABLE
        ),
        single_node_workloads=sum(1 for group in groups if group.single_node),
        workloads_by_risk={risk: risks[risk] for risk in RiskLevel},
        namespaces=summarize_namespaces(observations, namespaces),
    )
