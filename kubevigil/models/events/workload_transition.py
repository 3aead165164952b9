"""Workload-level change models derived between two poll cycles."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from kubevigil.constants.enums import InstanceStatus, WorkloadTransitionKind
from kubevigil.models.core.instance_info import InstanceIdentity
from kubevigil.models.core.workload_info import WorkloadIdentity


class WorkloadTransition(BaseModel):
    """Significant change of one workload since the previous cycle."""

    model_config = ConfigDict(frozen=True)

    identity: WorkloadIdentity
    kind: WorkloadTransitionKind
    timestamp: datetime
    previous_ready: int = 0
    current_ready: int = 0
    current_total: int = 0
    reason: str = ""


class NamespaceDisappearance(BaseModel):
    """Several instances of one namespace vanished in the same cycle."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    timestamp: datetime
    instances: tuple[InstanceIdentity, ...] = ()
    last_statuses: tuple[InstanceStatus | None, ...] = ()

    @property
    def instance_count(self) -> int:
        return len(self.instances)
