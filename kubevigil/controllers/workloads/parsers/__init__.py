"""Parsers for the workload monitor."""

from kubevigil.controllers.workloads.parsers.name_resolver import (
    needs_review,
    resolve_instance_name,
    resolve_workload_identity,
)
from kubevigil.controllers.workloads.parsers.pod_parser import (
    MalformedObservationError,
    ParseOutcome,
    PodParser,
)

__all__ = [
    "MalformedObservationError",
    "ParseOutcome",
    "PodParser",
    "needs_review",
    "resolve_instance_name",
    "resolve_workload_identity",
]
