"""Observation fetcher interface - supplies raw pod records per scope.

Talking to the orchestrator API is left to implementations of
``ObservationFetcher``; the workload monitor only consumes this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from kubevigil.constants.enums import FetchFailureKind


class FetchError(Exception):
    """Base class for failures of a whole fetch."""

    kind: FetchFailureKind = FetchFailureKind.TRANSIENT


class TransientFetchError(FetchError):
    """Network or server hiccup; retried at the next scheduled cycle."""

    kind = FetchFailureKind.TRANSIENT


class FetchTimeoutError(FetchError):
    """The fetch did not complete within its timeout."""

    kind = FetchFailureKind.TIMEOUT


class FetchAuthError(FetchError):
    """Credentials were rejected by the orchestrator."""

    kind = FetchFailureKind.AUTH


@dataclass
class FetchResult:
    """Raw pod records per scope plus the scopes that could not be fetched.

    A failed scope maps to a ``FetchError`` or a plain message; plain
    messages count as transient failures. A result with any failed scope
    is a partial fetch.
    """

    records: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failed_scopes: dict[str, FetchError | str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_scopes)

    def failure_for(self, scope: str) -> FetchError | None:
        """Typed failure of one scope, or None if it was fetched."""
        reason = self.failed_scopes.get(scope)
        if reason is None:
            if scope in self.records:
                return None
            return TransientFetchError("No data returned for scope")
        if isinstance(reason, FetchError):
            return reason
        return TransientFetchError(reason)


class ObservationFetcher(ABC):
    """Source of raw pod records for one domain."""

    @abstractmethod
    async def fetch(self, scopes: Sequence[str]) -> FetchResult:
        """Fetch raw pod records for every scope.

        Args:
            scopes: Namespaces to fetch, or ``ALL_NAMESPACES_SCOPE``.

        Returns:
            FetchResult with records for the scopes that succeeded.

        Raises:
            FetchError: If nothing could be fetched.
        """
        ...
