"""Controllers module for KubeVigil.

This module provides the poll-cycle controllers that observe workloads and
publish their aggregated health.
"""

from __future__ import annotations

# Base classes
from kubevigil.controllers.base import (
    AsyncControllerMixin,
    BaseController,
    CycleResult,
)

# Workload domain
from kubevigil.controllers.workloads.controller import WorkloadMonitorController

__all__ = [
    "AsyncControllerMixin",
    "BaseController",
    "CycleResult",
    "WorkloadMonitorController",
]
