"""Human readable durations."""

from __future__ import annotations

from datetime import datetime

_UNITS = (("d", 86400), ("h", 3600), ("m", 60))


def format_age(seconds: float) -> str:
    """Format a duration as its largest whole unit ("3d", "4h", "12m", "40s").

    Negative durations format as "0s".
    """
    total = max(0, int(seconds))
    for suffix, size in _UNITS:
        if total >= size:
            return f"{total // size}{suffix}"
    return f"{total}s"


def age_between(start: datetime, end: datetime) -> str:
    return format_age((end - start).total_seconds())
