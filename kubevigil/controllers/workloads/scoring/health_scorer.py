"""Health scorer - composite score and severity for workload groups."""

from __future__ import annotations

from kubevigil.constants.enums import NamespaceHealth, Severity
from kubevigil.constants.limits import (
    CRITICAL_READY_RATIO,
    NAMESPACE_HEALTHY_PCT,
    NAMESPACE_WARNING_PCT,
    SCORE_FAILURE_BUDGET,
    SCORE_READY_WEIGHT,
    SCORE_RUNNING_WEIGHT,
    WARNING_READY_RATIO,
)
from kubevigil.models.core.workload_info import WorkloadGroup


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def composite_score(total: int, running: int, ready: int, failed: int) -> int | None:
    """Score a group from 0 to 100, or None when it has no members.

    Running and ready instances each contribute up to 40 points; the last 20
    points shrink by 100 per failed fraction and never go negative.
    """
    if total <= 0:
        return None
    raw = (
        running / total * SCORE_RUNNING_WEIGHT
        + ready / total * SCORE_READY_WEIGHT
        + max(0.0, SCORE_FAILURE_BUDGET - failed / total * 100)
    )
    return min(100, max(0, _round_half_up(raw)))


def classify_severity(total: int, ready: int, pending: int, failed: int) -> Severity:
    if total <= 0:
        return Severity.EMPTY
    if failed > 0 or ready < total * CRITICAL_READY_RATIO:
        return Severity.CRITICAL
    if pending > 0 or ready < total * WARNING_READY_RATIO:
        return Severity.WARNING
    return Severity.HEALTHY


def score_group(group: WorkloadGroup) -> WorkloadGroup:
    """Return a copy of the group with score and severity filled in."""
    return group.model_copy(
        update={
            "health_score": composite_score(
                group.total, group.running, group.ready, group.failed
            ),
            "severity": classify_severity(
                group.total, group.ready, group.pending, group.failed
            ),
        }
    )


def namespace_health(total: int, ready: int) -> tuple[int, NamespaceHealth]:
    """Ready percentage of a namespace and its health bucket.

    An empty namespace counts as fully healthy.
    """
    pct = 100 if total <= 0 else _round_half_up(ready / total * 100)
    if pct >= NAMESPACE_HEALTHY_PCT:
        return pct, NamespaceHealth.HEALTHY
    if pct >= NAMESPACE_WARNING_PCT:
        return pct, NamespaceHealth.WARNING
    return pct, NamespaceHealth.CRITICAL
