"""Constants module for KubeVigil.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, numbers with Final)
- timeouts.py: Timeout values (seconds)
- limits.py: Limit and threshold values
- defaults.py: Default values for settings
"""

from kubevigil.constants.defaults import (
    DOMAIN_NAME_DEFAULT,
    HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT,
    MASS_DISAPPEARANCE_THRESHOLD_DEFAULT,
    RECENT_EVENTS_LIMIT_DEFAULT,
)
from kubevigil.constants.enums import (
    FetchFailureKind,
    FetchState,
    InstanceLifecycleState,
    InstanceStatus,
    LifecycleEventKind,
    NamespaceHealth,
    RiskLevel,
    Severity,
    Stability,
    WorkloadKind,
    WorkloadTransitionKind,
)
from kubevigil.constants.limits import (
    MAX_EVENTS_DISPLAY,
    POLL_INTERVAL_MIN,
)
from kubevigil.constants.timeouts import (
    FETCH_TIMEOUT_SECONDS,
    POLL_INTERVAL_SECONDS,
)
from kubevigil.constants.values import (
    ALL_NAMESPACES_SCOPE,
)

__all__ = [
    # Values
    "ALL_NAMESPACES_SCOPE",
    # Defaults
    "DOMAIN_NAME_DEFAULT",
    # Timeouts
    "FETCH_TIMEOUT_SECONDS",
    "HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT",
    "MASS_DISAPPEARANCE_THRESHOLD_DEFAULT",
    # Limits
    "MAX_EVENTS_DISPLAY",
    "POLL_INTERVAL_MIN",
    "POLL_INTERVAL_SECONDS",
    "RECENT_EVENTS_LIMIT_DEFAULT",
    # Enums
    "FetchFailureKind",
    "FetchState",
    "InstanceLifecycleState",
    "InstanceStatus",
    "LifecycleEventKind",
    "NamespaceHealth",
    "RiskLevel",
    "Severity",
    "Stability",
    "WorkloadKind",
    "WorkloadTransitionKind",
]
