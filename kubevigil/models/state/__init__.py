"""State, view and settings models."""

from kubevigil.models.state.aggregated_view import (
    AggregatedView,
    GlobalStatistics,
    NamespaceSummary,
    ScopeStatus,
)
from kubevigil.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    DomainSettings,
)

__all__ = [
    "AggregatedView",
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSaveError",
    "DomainSettings",
    "GlobalStatistics",
    "NamespaceSummary",
    "ScopeStatus",
]
