"""Limit and threshold constants for KubeVigil.

All limit values, thresholds, and validation ranges.
"""

from typing import Final

# ============================================================================
# Display limits
# ============================================================================

MAX_EVENTS_DISPLAY: Final = 100

# ============================================================================
# Validation limits
# ============================================================================

POLL_INTERVAL_MIN: Final = 5
FETCH_TIMEOUT_MIN: Final = 1
MASS_DISAPPEARANCE_THRESHOLD_MIN: Final = 1

# ============================================================================
# Health thresholds
# ============================================================================

# Fractions of total instances that must be ready.
CRITICAL_READY_RATIO: Final = 0.5
WARNING_READY_RATIO: Final = 0.8

# Composite score weights (sum to 100).
SCORE_RUNNING_WEIGHT: Final = 40
SCORE_READY_WEIGHT: Final = 40
SCORE_FAILURE_BUDGET: Final = 20

# Namespace ready-percentage buckets.
NAMESPACE_HEALTHY_PCT: Final = 90
NAMESPACE_WARNING_PCT: Final = 70

# ============================================================================
# Workload pattern thresholds
# ============================================================================

# Pending longer than this (seconds) counts as stuck.
STUCK_PENDING_SECONDS: Final = 600
# Average restarts per instance.
UNSTABLE_AVG_RESTARTS: Final = 5
MODERATE_AVG_RESTARTS: Final = 2

__all__ = [
    "CRITICAL_READY_RATIO",
    "FETCH_TIMEOUT_MIN",
    "MASS_DISAPPEARANCE_THRESHOLD_MIN",
    "MAX_EVENTS_DISPLAY",
    "MODERATE_AVG_RESTARTS",
    "NAMESPACE_HEALTHY_PCT",
    "NAMESPACE_WARNING_PCT",
    "POLL_INTERVAL_MIN",
    "SCORE_FAILURE_BUDGET",
    "SCORE_READY_WEIGHT",
    "SCORE_RUNNING_WEIGHT",
    "STUCK_PENDING_SECONDS",
    "UNSTABLE_AVG_RESTARTS",
    "WARNING_READY_RATIO",
]
