"""YAML-backed persistence for application settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from kubevigil.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    DomainSettings,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "KUBEVIGIL_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "kubevigil" / "settings.yaml"


class ConfigManager:
    """Loads and saves AppSettings as YAML."""

    @staticmethod
    def default_path() -> Path:
        """Resolve the settings path, honouring KUBEVIGIL_CONFIG."""
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return DEFAULT_CONFIG_PATH

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppSettings:
        """Load settings from YAML.

        A missing file yields default settings.

        Raises:
            ConfigLoadError: If the file cannot be read, parsed or validated.
        """
        config_path = Path(path) if path is not None else cls.default_path()
        if not config_path.exists():
            logger.info("No settings file at %s, using defaults", config_path)
            return AppSettings()

        try:
            raw_text = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigLoadError(f"Cannot read {config_path}: {exc}") from exc

        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigLoadError(f"Invalid YAML in {config_path}: {exc}") from exc

        if data is None:
            return AppSettings()
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Expected a mapping at the top of {config_path}, "
                f"got {type(data).__name__}"
            )

        try:
            settings = AppSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {exc}") from exc

        logger.debug(
            "Loaded settings from %s (%d domains)", config_path, len(settings.domains)
        )
        return settings

    @classmethod
    def save(cls, settings: AppSettings, path: str | Path | None = None) -> Path:
        """Write settings to YAML, creating parent directories.

        Raises:
            ConfigSaveError: If the file cannot be written.
        """
        config_path = Path(path) if path is not None else cls.default_path()
        payload = settings.model_dump(mode="json")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with config_path.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(payload, handle, sort_keys=False)
        except OSError as exc:
            raise ConfigSaveError(f"Cannot write {config_path}: {exc}") from exc

        logger.debug("Saved settings to %s", config_path)
        return config_path

    @classmethod
    def reset(cls, path: str | Path | None = None) -> AppSettings:
        """Overwrite the settings file with defaults and return them."""
        settings = AppSettings()
        cls.save(settings, path)
        return settings


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
    "DomainSettings",
]
