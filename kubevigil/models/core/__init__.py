"""Core instance and workload models."""

from kubevigil.models.core.instance_info import InstanceIdentity, InstanceObservation
from kubevigil.models.core.workload_info import (
    ResolvedName,
    WorkloadGroup,
    WorkloadIdentity,
)

__all__ = [
    "InstanceIdentity",
    "InstanceObservation",
    "ResolvedName",
    "WorkloadGroup",
    "WorkloadIdentity",
]
