"""Published read-only view produced by one completed poll cycle."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kubevigil.constants.enums import (
    FetchFailureKind,
    FetchState,
    InstanceLifecycleState,
    NamespaceHealth,
    RiskLevel,
    Severity,
)
from kubevigil.models.core.workload_info import WorkloadGroup
from kubevigil.models.events.lifecycle_event import LifecycleEvent
from kubevigil.models.events.workload_transition import (
    NamespaceDisappearance,
    WorkloadTransition,
)


class ScopeStatus(BaseModel):
    """Fetch status of one scope (a namespace, or all namespaces)."""

    model_config = ConfigDict(frozen=True)

    scope: str
    state: FetchState = FetchState.LOADING
    last_successful_poll: datetime | None = None
    error_message: str | None = None
    failure_kind: FetchFailureKind | None = None
    stale: bool = False
    observation_count: int = 0
    malformed_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scope": self.scope,
            "state": self.state.value,
            "last_successful_poll": self.last_successful_poll.isoformat()
            if self.last_successful_poll
            else None,
            "error_message": self.error_message,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
            "stale": self.stale,
            "observation_count": self.observation_count,
            "malformed_count": self.malformed_count,
        }


class NamespaceSummary(BaseModel):
    """Ready ratio of all live instances in one namespace."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    total: int = 0
    ready: int = 0
    health_pct: int = 100
    status: NamespaceHealth = NamespaceHealth.HEALTHY


class GlobalStatistics(BaseModel):
    """Counts across every scope of one domain."""

    model_config = ConfigDict(frozen=True)

    total_instances: int = 0
    running: int = 0
    pending: int = 0
    failed: int = 0
    succeeded: int = 0
    unknown: int = 0
    ready: int = 0
    total_restarts: int = 0
    workloads: int = 0
    standalone_instances: int = 0
    workloads_by_severity: dict[Severity, int] = Field(default_factory=dict)
    needs_review_workloads: int = 0
    malformed_observations: int = 0
    deleted_instances: int = 0
    missing_since_baseline: int = 0
    stuck_instances: int = 0
    unstable_workloads: int = 0
    single_node_workloads: int = 0
    workloads_by_risk: dict[RiskLevel, int] = Field(default_factory=dict)
    namespaces: tuple[NamespaceSummary, ...] = ()


class AggregatedView(BaseModel):
    """Immutable combination of groups, statistics and recent events."""

    model_config = ConfigDict(frozen=True)

    domain: str
    generation: int = 0
    produced_at: datetime
    last_successful_poll: datetime | None = None
    stale: bool = False
    scopes: dict[str, ScopeStatus] = Field(default_factory=dict)
    workloads: tuple[WorkloadGroup, ...] = ()
    statistics: GlobalStatistics = GlobalStatistics()
    recent_events: tuple[LifecycleEvent, ...] = ()
    instance_states: dict[str, InstanceLifecycleState] = Field(default_factory=dict)
    workload_transitions: tuple[WorkloadTransition, ...] = ()
    disappearances: tuple[NamespaceDisappearance, ...] = ()
    snapshot_name: str | None = None

    @property
    def groups(self) -> tuple[WorkloadGroup, ...]:
        return tuple(group for group in self.workloads if not group.is_standalone)

    @property
    def standalone_instances(self) -> tuple[WorkloadGroup, ...]:
        return tuple(group for group in self.workloads if group.is_standalone)

    @property
    def stale_scopes(self) -> list[str]:
        return sorted(name for name, status in self.scopes.items() if status.stale)

    def find_workload(self, namespace: str, workload_name: str) -> WorkloadGroup | None:
        for group in self.workloads:
            if (
                group.identity.namespace == namespace
                and group.identity.workload_name == workload_name
            ):
                return group
        return None
