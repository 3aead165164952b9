"""Builders shared by KubeVigil tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from kubevigil.constants.enums import InstanceStatus
from kubevigil.controllers.workloads.fetchers import FetchResult, ObservationFetcher
from kubevigil.models.core.instance_info import InstanceObservation

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_observation(
    name: str,
    namespace: str = "default",
    status: InstanceStatus = InstanceStatus.RUNNING,
    ready: int = 1,
    total: int = 1,
    restarts: int = 0,
    first_seen: datetime | None = None,
    last_seen: datetime | None = None,
    kind_hint: str | None = None,
    node: str | None = None,
) -> InstanceObservation:
    created = first_seen or BASE_TIME - timedelta(hours=1)
    return InstanceObservation(
        namespace=namespace,
        name=name,
        workload_kind_hint=kind_hint,
        status=status,
        ready_containers=ready,
        total_containers=total,
        restart_count=restarts,
        node=node,
        first_seen=created,
        last_seen=last_seen or BASE_TIME,
    )


def make_pod(
    name: str,
    namespace: str = "default",
    phase: str = "Running",
    ready: Sequence[bool] = (True,),
    restarts: Sequence[int] | None = None,
    created: str = "2024-05-01T11:00:00Z",
    owner_kind: str | None = "ReplicaSet",
    node: str | None = "node-a",
) -> dict[str, Any]:
    restarts = restarts if restarts is not None else [0] * len(ready)
    metadata: dict[str, Any] = {
        "name": name,
        "namespace": namespace,
        "creationTimestamp": created,
    }
    if owner_kind:
        metadata["ownerReferences"] = [
            {"kind": owner_kind, "name": "owner", "controller": True}
        ]
    return {
        "metadata": metadata,
        "spec": {
            "nodeName": node,
            "containers": [{"name": f"c{i}"} for i in range(len(ready))],
        },
        "status": {
            "phase": phase,
            "containerStatuses": [
                {"name": f"c{i}", "ready": flag, "restartCount": count}
                for i, (flag, count) in enumerate(zip(ready, restarts))
            ],
        },
    }


class ScriptedFetcher(ObservationFetcher):
    """Fetcher that replays a list of results or exceptions, one per call."""

    def __init__(self, script: list[FetchResult | BaseException]) -> None:
        self.script = list(script)
        self.calls: list[list[str]] = []

    async def fetch(self, scopes: Sequence[str]) -> FetchResult:
        self.calls.append(list(scopes))
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, BaseException):
            raise step
        return step


class SteppingClock:
    """Deterministic clock advancing by a fixed step on every call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=15)) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current
