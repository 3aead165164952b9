"""All enum definitions for KubeVigil.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Instance Enums
# =============================================================================

class InstanceStatus(Enum):
    """Pod phase values reported by the Kubernetes API."""

    PENDING = "Pending"
    RUNNING = "Running"
    FAILED = "Failed"
    SUCCEEDED = "Succeeded"
    UNKNOWN = "Unknown"

    @classmethod
    def from_phase(cls, phase: object) -> "InstanceStatus":
        """Map a raw phase string onto a status, falling back to UNKNOWN."""
        value = str(phase or "").strip().lower()
        for member in cls:
            if member.value.lower() == value:
                return member
        return cls.UNKNOWN


class InstanceLifecycleState(Enum):
    """Lifecycle state of one instance name slot, computed once per cycle."""

    ACTIVE = "Active"
    DELETED = "Deleted"
    MISSING_SINCE_BASELINE = "MissingSinceBaseline"


class LifecycleEventKind(Enum):
    """Kinds of recorded instance transitions."""

    CREATED = "created"
    DELETED = "deleted"
    STATUS_CHANGE = "status_change"
    RESTART = "restart"


# =============================================================================
# Workload Enums
# =============================================================================

class WorkloadKind(Enum):
    """Workload kinds inferred by the naming heuristic."""

    DEPLOYMENT = "Deployment"
    STANDALONE_POD = "StandalonePod"


class Severity(Enum):
    """Workload severity levels, ordered from best to worst."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EMPTY = "empty"


class NamespaceHealth(Enum):
    """Namespace-level health buckets derived from ready percentage."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class Stability(Enum):
    """Restart stability of a workload, from its average restarts per instance."""

    STABLE = "stable"
    MODERATE = "moderate"
    UNSTABLE = "unstable"


class RiskLevel(Enum):
    """Operational risk of a workload from restart stability and node spread."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WorkloadTransitionKind(Enum):
    """Workload-level changes detected between two cycles."""

    RECOVERED = "recovered"
    DEGRADED = "degraded"
    FAILED = "failed"
    STOPPED = "stopped"
    STARTED = "started"


# =============================================================================
# Fetch State Enums
# =============================================================================

class FetchState(Enum):
    """Data fetch state values."""

    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class FetchFailureKind(Enum):
    """Typed fetch failures reported by an observation fetcher."""

    TRANSIENT = "transient"
    TIMEOUT = "timeout"
    AUTH = "auth"


__all__ = [
    # Instance
    "InstanceLifecycleState",
    "InstanceStatus",
    "LifecycleEventKind",
    # Workload
    "NamespaceHealth",
    "RiskLevel",
    "Severity",
    "Stability",
    "WorkloadKind",
    "WorkloadTransitionKind",
    # Fetch
    "FetchFailureKind",
    "FetchState",
]
