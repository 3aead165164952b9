"""Logging setup for KubeVigil."""

from __future__ import annotations

import logging

from kubevigil.constants.defaults import LOG_FORMAT_DEFAULT, LOG_LEVEL_DEFAULT


def configure_logging(level_name: str = LOG_LEVEL_DEFAULT, fmt: str = LOG_FORMAT_DEFAULT) -> int:
    """Configure root logging and return the numeric level applied.

    Unknown level names fall back to INFO.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format=fmt)
    logging.getLogger("kubevigil").setLevel(level)
    return level
