"""Utility functions for KubeVigil."""

from kubevigil.utils.logging_config import configure_logging
from kubevigil.utils.time_format import age_between, format_age

__all__ = [
    # Logging
    "configure_logging",
    # Time
    "age_between",
    "format_age",
]
