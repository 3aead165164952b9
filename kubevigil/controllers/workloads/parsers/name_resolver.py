"""Identity and naming resolver - maps instance names onto logical workloads.

Deployment-managed pods are named ``<workload>-<replicaset-hash>-<pod-hash>``.
Any name with at least three dash-separated segments is therefore treated as
belonging to the workload named by everything but the last two segments;
shorter names are standalone pods that form their own workload.
"""

from __future__ import annotations

from kubevigil.constants.enums import WorkloadKind
from kubevigil.constants.values import (
    GENERATED_SUFFIX_SEGMENTS,
    NAME_SEPARATOR,
    REPLICA_SET_OWNER_KINDS,
)
from kubevigil.models.core.instance_info import InstanceObservation
from kubevigil.models.core.workload_info import ResolvedName, WorkloadIdentity

_MIN_GENERATED_SEGMENTS = GENERATED_SUFFIX_SEGMENTS + 1


def resolve_instance_name(name: str) -> ResolvedName:
    """Split an instance name into workload name, kind and generated suffix.

    Total over all strings, including the empty string.
    """
    segments = name.split(NAME_SEPARATOR)
    if len(segments) >= _MIN_GENERATED_SEGMENTS:
        return ResolvedName(
            workload_name=NAME_SEPARATOR.join(segments[:-GENERATED_SUFFIX_SEGMENTS]),
            kind=WorkloadKind.DEPLOYMENT,
            instance_suffix=NAME_SEPARATOR.join(segments[-GENERATED_SUFFIX_SEGMENTS:]),
        )
    return ResolvedName(workload_name=name, kind=WorkloadKind.STANDALONE_POD)


def resolve_workload_identity(observation: InstanceObservation) -> WorkloadIdentity:
    resolved = resolve_instance_name(observation.name)
    return WorkloadIdentity(
        namespace=observation.namespace,
        workload_name=resolved.workload_name,
        kind=resolved.kind,
    )


def needs_review(name: str, kind_hint: str | None) -> bool:
    """Whether the controller-kind hint contradicts the naming heuristic.

    Instances without a hint are never flagged.
    """
    if kind_hint is None:
        return False
    hinted_generated = kind_hint in REPLICA_SET_OWNER_KINDS
    resolved_generated = resolve_instance_name(name).kind == WorkloadKind.DEPLOYMENT
    return hinted_generated != resolved_generated
