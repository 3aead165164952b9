"""Pod parser for the workload monitor - turns raw pod records into observations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from kubevigil.constants.enums import InstanceStatus
from kubevigil.constants.values import NO_OWNER_KIND
from kubevigil.models.core.instance_info import InstanceObservation

logger = logging.getLogger(__name__)


class MalformedObservationError(ValueError):
    """Raised when a raw pod record lacks a required field or has bad counters."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


@dataclass
class ParseOutcome:
    """Observations parsed from one scope plus the number of rejected records."""

    observations: list[InstanceObservation] = field(default_factory=list)
    malformed_count: int = 0


class PodParser:
    """Parses raw pod dictionaries (Kubernetes API shape) into observations."""

    def parse_pod(self, pod: dict[str, Any], polled_at: datetime) -> InstanceObservation:
        """Parse a single pod record.

        Args:
            pod: Raw pod dictionary from the API.
            polled_at: Time of the poll that produced the record.

        Returns:
            InstanceObservation for the pod.

        Raises:
            MalformedObservationError: If name, namespace or creation timestamp
                is missing, or a container counter is not an integer.
        """
        if not isinstance(pod, dict):
            raise MalformedObservationError(f"pod record is not a mapping: {pod!r}")

        metadata = pod.get("metadata") or {}
        status = pod.get("status") or {}
        spec = pod.get("spec") or {}

        name = metadata.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedObservationError("pod record has no metadata.name")
        namespace = metadata.get("namespace")
        if not isinstance(namespace, str) or not namespace:
            raise MalformedObservationError(
                f"pod {name} has no metadata.namespace", name=name
            )
        created = self._parse_timestamp(metadata.get("creationTimestamp"), name)

        container_statuses = status.get("containerStatuses")
        if container_statuses is None:
            container_statuses = []
        if not isinstance(container_statuses, list):
            raise MalformedObservationError(
                f"pod {name} has non-list containerStatuses", name=name
            )

        ready_containers = 0
        restart_count = 0
        for container in container_statuses:
            if not isinstance(container, dict):
                raise MalformedObservationError(
                    f"pod {name} has a malformed container status", name=name
                )
            if container.get("ready") is True:
                ready_containers += 1
            restart_count += self._as_counter(
                container.get("restartCount", 0), "restartCount", name
            )

        declared_containers = spec.get("containers")
        if isinstance(declared_containers, list) and declared_containers:
            total_containers = max(len(declared_containers), len(container_statuses))
        else:
            total_containers = len(container_statuses)

        return InstanceObservation(
            namespace=namespace,
            name=name,
            workload_kind_hint=self._controller_kind(metadata),
            status=InstanceStatus.from_phase(status.get("phase")),
            ready_containers=ready_containers,
            total_containers=total_containers,
            restart_count=restart_count,
            node=spec.get("nodeName") or None,
            first_seen=created,
            last_seen=polled_at,
        )

    def parse_pods(
        self, pods: Iterable[dict[str, Any]], polled_at: datetime
    ) -> ParseOutcome:
        """Parse a batch of pod records, excluding and counting malformed ones."""
        outcome = ParseOutcome()
        for pod in pods:
            try:
                outcome.observations.append(self.parse_pod(pod, polled_at))
            except MalformedObservationError as exc:
                outcome.malformed_count += 1
                logger.debug("Skipping malformed observation: %s", exc)
        return outcome

    def _controller_kind(self, metadata: dict[str, Any]) -> str:
        """Return the kind of the controlling owner, or NO_OWNER_KIND."""
        owners = metadata.get("ownerReferences") or []
        fallback: str | None = None
        for owner in owners:
            if not isinstance(owner, dict):
                continue
            kind = owner.get("kind")
            if not kind:
                continue
            if owner.get("controller"):
                return str(kind)
            fallback = fallback or str(kind)
        return fallback or NO_OWNER_KIND

    @staticmethod
    def _as_counter(value: Any, field_name: str, pod_name: str) -> int:
        # bool is an int subclass but never a valid counter.
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise MalformedObservationError(
                f"pod {pod_name} has non-integer {field_name}: {value!r}",
                name=pod_name,
            )
        return value

    @staticmethod
    def _parse_timestamp(value: Any, pod_name: str) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str) and value:
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError as exc:
                raise MalformedObservationError(
                    f"pod {pod_name} has invalid creationTimestamp {value!r}",
                    name=pod_name,
                ) from exc
        else:
            raise MalformedObservationError(
                f"pod {pod_name} has no metadata.creationTimestamp", name=pod_name
            )
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
