"""Aggregators for the workload monitor."""

from kubevigil.controllers.workloads.aggregators.workload_aggregator import (
    aggregate_workloads,
    build_group,
    build_statistics,
    summarize_namespaces,
)

__all__ = [
    "aggregate_workloads",
    "build_group",
    "build_statistics",
    "summarize_namespaces",
]
