"""Workload identity and aggregated group models."""

from pydantic import BaseModel, ConfigDict

from kubevigil.constants.enums import RiskLevel, Severity, Stability, WorkloadKind
from kubevigil.models.core.instance_info import InstanceObservation


class ResolvedName(BaseModel):
    """Result of splitting an instance name with the naming heuristic."""

    model_config = ConfigDict(frozen=True)

    workload_name: str
    kind: WorkloadKind
    instance_suffix: str | None = None


class WorkloadIdentity(BaseModel):
    """Logical workload an instance belongs to, scoped to a namespace."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    workload_name: str
    kind: WorkloadKind

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.workload_name}"

    def __str__(self) -> str:
        return f"{self.kind.value} {self.key}"


class WorkloadGroup(BaseModel):
    """Workload health recomputed from scratch on every poll cycle."""

    model_config = ConfigDict(frozen=True)

    identity: WorkloadIdentity
    members: tuple[InstanceObservation, ...] = ()
    total: int = 0
    running: int = 0
    pending: int = 0
    failed: int = 0
    succeeded: int = 0
    unknown: int = 0
    ready: int = 0
    container_ready_total: int = 0
    container_expected_total: int = 0
    health_score: int | None = None
    severity: Severity = Severity.EMPTY
    needs_review: bool = False
    stuck: int = 0
    stability: Stability = Stability.STABLE
    nodes: tuple[str, ...] = ()
    single_node: bool = False
    risk: RiskLevel = RiskLevel.LOW

    @property
    def is_standalone(self) -> bool:
        """A single live instance is reported on its own rather than as a group."""
        return self.total == 1
