"""Base controller with async poll-cycle patterns for KubeVigil.

This module provides the foundation for controllers that refresh their data
on a background asyncio loop and publish immutable results.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """Result wrapper for one poll cycle."""

    success: bool
    skipped: bool = False
    stale: bool = False
    generation: int | None = None
    events_recorded: int = 0
    error: str | None = None
    duration_ms: float = 0.0


class AsyncControllerMixin:
    """Mixin providing cycle timing for async controllers."""

    def __init__(self) -> None:
        """Initialize the async controller mixin."""
        self._load_start_time: float | None = None

    def _start_timer(self) -> None:
        self._load_start_time = time.monotonic()

    def _elapsed_ms(self) -> float:
        if self._load_start_time is None:
            return 0.0
        return (time.monotonic() - self._load_start_time) * 1000


class BaseController(AsyncControllerMixin, ABC):
    """Base controller class for polling controllers.

    Subclasses implement a single cycle plus the loop lifecycle.
    """

    @abstractmethod
    async def poll_once(self) -> CycleResult:
        """Run one poll cycle.

        Returns:
            CycleResult describing the cycle outcome
        """
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the background poll loop."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the background poll loop."""
        ...
