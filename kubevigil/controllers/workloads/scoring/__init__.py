"""Health scoring and pattern analysis for workload groups."""

from kubevigil.controllers.workloads.scoring.health_scorer import (
    classify_severity,
    composite_score,
    namespace_health,
    score_group,
)
from kubevigil.controllers.workloads.scoring.pattern_analyzer import (
    analyze_group,
    assess_risk,
    classify_stability,
)

__all__ = [
    "analyze_group",
    "assess_risk",
    "classify_severity",
    "classify_stability",
    "composite_score",
    "namespace_health",
    "score_group",
]
