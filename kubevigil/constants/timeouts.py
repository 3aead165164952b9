"""Timeout constants for KubeVigil.

All timeout and interval values for fetches, poll cycles and shutdown.
"""

from typing import Final

# ============================================================================
# Fetch timeouts (float, in seconds)
# ============================================================================

FETCH_TIMEOUT_SECONDS: Final = 20.0

# ============================================================================
# Poll loop timings (float, in seconds)
# ============================================================================

POLL_INTERVAL_SECONDS: Final = 15.0
STOP_GRACE_TIMEOUT_SECONDS: Final = 60.0

__all__ = [
    "FETCH_TIMEOUT_SECONDS",
    "POLL_INTERVAL_SECONDS",
    "STOP_GRACE_TIMEOUT_SECONDS",
]
