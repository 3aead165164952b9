"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from typing import Final

# ============================================================================
# Domain defaults
# ============================================================================

DOMAIN_NAME_DEFAULT: Final = "default"

# ============================================================================
# History defaults
# ============================================================================

RECENT_EVENTS_LIMIT_DEFAULT: Final = 100
HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT: Final = 500
MASS_DISAPPEARANCE_THRESHOLD_DEFAULT: Final = 3

# ============================================================================
# Logging defaults
# ============================================================================

LOG_LEVEL_DEFAULT: Final = "INFO"
LOG_FORMAT_DEFAULT: Final = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

__all__ = [
    "DOMAIN_NAME_DEFAULT",
    "HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT",
    "LOG_FORMAT_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "MASS_DISAPPEARANCE_THRESHOLD_DEFAULT",
    "RECENT_EVENTS_LIMIT_DEFAULT",
]
