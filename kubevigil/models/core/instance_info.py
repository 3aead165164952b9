"""Instance observation models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from kubevigil.constants.enums import InstanceStatus
from kubevigil.constants.limits import STUCK_PENDING_SECONDS
from kubevigil.utils.time_format import format_age


class InstanceIdentity(BaseModel):
    """Name slot of one instance: unique per namespace, reusable after deletion."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"

    def __str__(self) -> str:
        return self.key


class InstanceObservation(BaseModel):
    """Point-in-time state of one pod, captured fresh on every poll."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    workload_kind_hint: str | None = None
    status: InstanceStatus = InstanceStatus.UNKNOWN
    ready_containers: int = Field(default=0, ge=0)
    total_containers: int = Field(default=0, ge=0)
    restart_count: int = Field(default=0, ge=0)
    node: str | None = None
    first_seen: datetime
    last_seen: datetime

    @property
    def identity(self) -> InstanceIdentity:
        return InstanceIdentity(namespace=self.namespace, name=self.name)

    @property
    def age_seconds(self) -> float:
        """Seconds between creation and the poll that captured this observation."""
        return max(0.0, (self.last_seen - self.first_seen).total_seconds())

    @property
    def age(self) -> str:
        return format_age(self.age_seconds)

    @property
    def is_fully_ready(self) -> bool:
        """Running with every container ready."""
        return (
            self.status == InstanceStatus.RUNNING
            and self.ready_containers == self.total_containers
        )

    @property
    def is_stuck(self) -> bool:
        """Pending for longer than the stuck threshold."""
        return (
            self.status == InstanceStatus.PENDING
            and self.age_seconds > STUCK_PENDING_SECONDS
        )

    @property
    def is_partially_ready(self) -> bool:
        return (
            self.status == InstanceStatus.RUNNING
            and 0 < self.ready_containers < self.total_containers
        )
