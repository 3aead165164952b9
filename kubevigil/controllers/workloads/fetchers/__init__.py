"""Fetcher interfaces for the workload monitor."""

from kubevigil.controllers.workloads.fetchers.observation_fetcher import (
    FetchAuthError,
    FetchError,
    FetchResult,
    FetchTimeoutError,
    ObservationFetcher,
    TransientFetchError,
)

__all__ = [
    "FetchAuthError",
    "FetchError",
    "FetchResult",
    "FetchTimeoutError",
    "ObservationFetcher",
    "TransientFetchError",
]
