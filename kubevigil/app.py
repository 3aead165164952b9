"""Main application class for KubeVigil."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from kubevigil.constants.defaults import DOMAIN_NAME_DEFAULT
from kubevigil.controllers.base import CycleResult
from kubevigil.controllers.workloads import ObservationFetcher, WorkloadMonitorController
from kubevigil.controllers.workloads.snapshot import SnapshotStore
from kubevigil.models.state.aggregated_view import AggregatedView
from kubevigil.models.state.config_manager import (
    AppSettings,
    ConfigLoadError,
    ConfigManager,
    DomainSettings,
)
from kubevigil.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[DomainSettings], ObservationFetcher]


class MonitorApp:
    """Runs one workload monitor per enabled domain."""

    def __init__(
        self,
        fetcher_factory: FetcherFactory,
        settings: AppSettings | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        self.config_path = Path(config_path) if config_path is not None else None
        self._fetcher_factory = fetcher_factory
        self.settings = settings if settings is not None else self._load_settings()
        self.controllers: dict[str, WorkloadMonitorController] = {}
        for domain in self.settings.enabled_domains:
            self.controllers[domain.name] = WorkloadMonitorController(
                fetcher_factory(domain),
                domain,
                self.settings,
                snapshot_store=self._snapshot_store_for(domain),
            )

    def _load_settings(self) -> AppSettings:
        """Load application settings from persistent storage."""
        try:
            return ConfigManager.load(self.config_path)
        except ConfigLoadError as exc:
            logger.warning("Using default settings: %s", exc)
            return AppSettings()

    def save_settings(self) -> Path:
        return ConfigManager.save(self.settings, self.config_path)

    def _snapshot_store_for(self, domain: DomainSettings) -> SnapshotStore | None:
        """Snapshot file of one domain.

        The default domain uses ``snapshot_path`` as is; every other domain
        gets its name appended to the file stem, so paths stay stable when
        domains are enabled or disabled.
        """
        if not self.settings.snapshot_path:
            return None
        path = Path(self.settings.snapshot_path).expanduser()
        if domain.name != DOMAIN_NAME_DEFAULT:
            path = path.with_name(f"{path.stem}-{domain.name}{path.suffix}")
        return SnapshotStore(path)

    def controller(self, name: str) -> WorkloadMonitorController:
        """Controller of one domain.

        Raises:
            KeyError: If no enabled domain has that name.
        """
        try:
            return self.controllers[name]
        except KeyError:
            raise KeyError(f"Unknown or disabled domain: {name!r}") from None

    def views(self) -> dict[str, AggregatedView | None]:
        return {name: ctrl.current_view() for name, ctrl in self.controllers.items()}

    async def start(self) -> None:
        configure_logging(self.settings.log_level)
        for ctrl in self.controllers.values():
            await ctrl.start()
        logger.info("Monitoring %d domains", len(self.controllers))

    async def stop(self) -> None:
        await asyncio.gather(*(ctrl.stop() for ctrl in self.controllers.values()))

    async def force_poll_all(self) -> dict[str, CycleResult]:
        names = list(self.controllers)
        results = await asyncio.gather(
            *(self.controllers[name].force_poll() for name in names)
        )
        return dict(zip(names, results))

    async def __aenter__(self) -> MonitorApp:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
