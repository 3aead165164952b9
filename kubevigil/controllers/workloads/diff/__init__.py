"""Poll-to-poll diffing for the workload monitor."""

from kubevigil.controllers.workloads.diff.diff_engine import (
    diff_instance,
    diff_observations,
    index_observations,
)
from kubevigil.controllers.workloads.diff.lifecycle_ledger import LifecycleLedger
from kubevigil.controllers.workloads.diff.workload_transitions import (
    classify_transition,
    detect_mass_disappearance,
    detect_workload_transitions,
)

__all__ = [
    "LifecycleLedger",
    "classify_transition",
    "detect_mass_disappearance",
    "detect_workload_transitions",
    "diff_instance",
    "diff_observations",
    "index_observations",
]
