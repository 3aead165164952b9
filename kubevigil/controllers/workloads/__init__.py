"""Workload monitor domain."""

from kubevigil.controllers.workloads.controller import WorkloadMonitorController
from kubevigil.controllers.workloads.fetchers import FetchResult, ObservationFetcher
from kubevigil.controllers.workloads.parsers import PodParser

__all__ = [
    "FetchResult",
    "ObservationFetcher",
    "PodParser",
    "WorkloadMonitorController",
]
