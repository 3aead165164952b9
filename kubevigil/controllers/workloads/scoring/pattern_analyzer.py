"""Workload pattern analysis - restart stability, node spread and risk."""

from __future__ import annotations

from kubevigil.constants.enums import RiskLevel, Stability
from kubevigil.constants.limits import MODERATE_AVG_RESTARTS, UNSTABLE_AVG_RESTARTS
from kubevigil.models.core.workload_info import WorkloadGroup


def classify_stability(total_restarts: int, instance_count: int) -> Stability:
    """Classify by average restarts per instance (above 5 unstable, above 2 moderate)."""
    if instance_count <= 0:
        return Stability.STABLE
    average = total_restarts / instance_count
    if average > UNSTABLE_AVG_RESTARTS:
        return Stability.UNSTABLE
    if average > MODERATE_AVG_RESTARTS:
        return Stability.MODERATE
    return Stability.STABLE


def assess_risk(stability: Stability, single_node: bool) -> RiskLevel:
    """Risk from stability, raised one level when every instance shares a node."""
    risk = {
        Stability.UNSTABLE: RiskLevel.HIGH,
        Stability.MODERATE: RiskLevel.MEDIUM,
    }.get(stability, RiskLevel.LOW)
    if single_node:
        risk = RiskLevel.MEDIUM if risk == RiskLevel.LOW else RiskLevel.HIGH
    return risk


def analyze_group(group: WorkloadGroup) -> WorkloadGroup:
    """Return a copy of the group with its pattern fields filled in.

    A workload is single-node when it has more than one instance and all
    scheduled instances run on the same node. Unscheduled instances do not
    count towards the spread.
    """
    nodes = tuple(sorted({obs.node for obs in group.members if obs.node}))
    single_node = len(nodes) == 1 and group.total > 1
    stability = classify_stability(
        sum(obs.restart_count for obs in group.members), group.total
    )
    return group.model_copy(
        update={
            "stuck": sum(1 for obs in group.members if obs.is_stuck),
            "stability": stability,
            "nodes": nodes,
            "single_node": single_node,
            "risk": assess_risk(stability, single_node),
        }
    )
