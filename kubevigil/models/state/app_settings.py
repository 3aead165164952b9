"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kubevigil.constants.defaults import (
    DOMAIN_NAME_DEFAULT,
    HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT,
    LOG_LEVEL_DEFAULT,
    MASS_DISAPPEARANCE_THRESHOLD_DEFAULT,
    RECENT_EVENTS_LIMIT_DEFAULT,
)
from kubevigil.constants.limits import (
    FETCH_TIMEOUT_MIN,
    MASS_DISAPPEARANCE_THRESHOLD_MIN,
    POLL_INTERVAL_MIN,
)
from kubevigil.constants.timeouts import FETCH_TIMEOUT_SECONDS, POLL_INTERVAL_SECONDS


class DomainSettings(BaseModel):
    """One monitored domain (a cluster context and its namespaces)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = DOMAIN_NAME_DEFAULT
    # Empty means every namespace.
    namespaces: list[str] = Field(default_factory=list)
    poll_interval_seconds: float = Field(
        default=POLL_INTERVAL_SECONDS, ge=POLL_INTERVAL_MIN
    )
    fetch_timeout_seconds: float = Field(
        default=FETCH_TIMEOUT_SECONDS, ge=FETCH_TIMEOUT_MIN
    )
    enabled: bool = True

    @field_validator("namespaces")
    @classmethod
    def _dedupe_namespaces(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for namespace in value:
            namespace = namespace.strip()
            if namespace and namespace not in seen:
                seen.append(namespace)
        return seen


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    domains: list[DomainSettings] = Field(default_factory=lambda: [DomainSettings()])

    # History and view sizes
    recent_events_limit: int = Field(default=RECENT_EVENTS_LIMIT_DEFAULT, ge=0)
    history_max_events_per_instance: int | None = Field(
        default=HISTORY_MAX_EVENTS_PER_INSTANCE_DEFAULT, ge=1
    )

    # Detection thresholds
    mass_disappearance_threshold: int = Field(
        default=MASS_DISAPPEARANCE_THRESHOLD_DEFAULT,
        ge=MASS_DISAPPEARANCE_THRESHOLD_MIN,
    )

    # Persistence
    snapshot_path: str | None = None

    # Logging
    log_level: str = LOG_LEVEL_DEFAULT

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or LOG_LEVEL_DEFAULT

    @field_validator("domains")
    @classmethod
    def _unique_domain_names(cls, value: list[DomainSettings]) -> list[DomainSettings]:
        names = [domain.name for domain in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate domain names: {', '.join(duplicates)}")
        return value

    @property
    def enabled_domains(self) -> list[DomainSettings]:
        return [domain for domain in self.domains if domain.enabled]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
