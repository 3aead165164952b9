"""Lifecycle event and transition models."""

from kubevigil.models.events.lifecycle_event import InstanceHistory, LifecycleEvent
from kubevigil.models.events.workload_transition import (
    NamespaceDisappearance,
    WorkloadTransition,
)

__all__ = [
    "InstanceHistory",
    "LifecycleEvent",
    "NamespaceDisappearance",
    "WorkloadTransition",
]
