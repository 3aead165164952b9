"""Instance lifecycle event and history models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from kubevigil.constants.enums import (
    InstanceLifecycleState,
    InstanceStatus,
    LifecycleEventKind,
)
from kubevigil.models.core.instance_info import InstanceIdentity


class LifecycleEvent(BaseModel):
    """One recorded transition of an instance between two polls."""

    model_config = ConfigDict(frozen=True)

    identity: InstanceIdentity
    kind: LifecycleEventKind
    timestamp: datetime
    previous_status: InstanceStatus | None = None
    new_status: InstanceStatus | None = None
    restart_count: int = 0
    # Creation time of the incarnation this event belongs to.
    first_seen: datetime | None = None

    @property
    def dedup_key(self) -> tuple:
        return (
            self.identity,
            self.kind,
            self.timestamp,
            self.first_seen,
            self.previous_status,
            self.new_status,
            self.restart_count,
        )


class InstanceHistory(BaseModel):
    """History query result for one instance name slot."""

    model_config = ConfigDict(frozen=True)

    identity: InstanceIdentity
    events: tuple[LifecycleEvent, ...] = ()
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    current_status: InstanceStatus | None = None
    lifecycle_state: InstanceLifecycleState = InstanceLifecycleState.ACTIVE
    deleted_at: datetime | None = None
    restart_count: int = 0
    incarnations: int = 0
