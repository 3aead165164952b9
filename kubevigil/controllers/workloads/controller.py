"""Workload monitor controller - poll loop and orchestration for one domain.

Each cycle runs fetch (with timeout), parse, resolve, aggregate, score, diff
against the previous cycle, ledger update and lifecycle state derivation,
then publishes one immutable AggregatedView.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import suppress
from datetime import datetime, timezone

from kubevigil.constants.enums import (
    FetchFailureKind,
    FetchState,
    InstanceLifecycleState,
)
from kubevigil.constants.timeouts import STOP_GRACE_TIMEOUT_SECONDS
from kubevigil.constants.values import ALL_NAMESPACES_SCOPE
from kubevigil.controllers.base import BaseController, CycleResult
from kubevigil.controllers.workloads.aggregators import (
    aggregate_workloads,
    build_statistics,
)
from kubevigil.controllers.workloads.diff import (
    LifecycleLedger,
    detect_mass_disappearance,
    detect_workload_transitions,
    diff_observations,
)
from kubevigil.controllers.workloads.fetchers import (
    FetchError,
    FetchResult,
    FetchTimeoutError,
    ObservationFetcher,
)
from kubevigil.controllers.workloads.parsers import PodParser
from kubevigil.controllers.workloads.snapshot import (
    BaselineManager,
    SnapshotError,
    SnapshotStore,
)
from kubevigil.models.core.instance_info import InstanceIdentity, InstanceObservation
from kubevigil.models.core.workload_info import WorkloadGroup
from kubevigil.models.events.lifecycle_event import InstanceHistory
from kubevigil.models.snapshot.snapshot_info import Snapshot, SnapshotDiff
from kubevigil.models.state.aggregated_view import AggregatedView, ScopeStatus
from kubevigil.models.state.app_settings import AppSettings, DomainSettings
from kubevigil.models.state.state_store import StateStore

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkloadMonitorController(BaseController):
    """Polls one domain and maintains its aggregated workload view.

    Cycles never overlap: a cycle requested while another is running is
    skipped, and scheduled ticks missed during a long cycle are dropped
    rather than queued.
    """

    def __init__(
        self,
        fetcher: ObservationFetcher,
        domain: DomainSettings | None = None,
        settings: AppSettings | None = None,
        *,
        parser: PodParser | None = None,
        snapshot_store: SnapshotStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__()
        self._fetcher = fetcher
        self._domain = domain or DomainSettings()
        self._settings = settings or AppSettings(domains=[self._domain])
        self._parser = parser or PodParser()
        self._snapshot_store = snapshot_store
        self._clock = clock or _utc_now

        self._store = StateStore(
            ledger=LifecycleLedger(recent_limit=self._settings.recent_events_limit),
            baseline=BaselineManager(),
        )
        self._scope_states: dict[str, ScopeStatus] = {}
        self._cycle_lock = asyncio.Lock()
        self._stop_event = asyncio.Event()
        self._loop_task: asyncio.Task[None] | None = None
        self._stopped = False

        self._restore_snapshot()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def domain(self) -> DomainSettings:
        return self._domain

    @property
    def name(self) -> str:
        return self._domain.name

    @property
    def scopes(self) -> list[str]:
        return list(self._domain.namespaces) or [ALL_NAMESPACES_SCOPE]

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def is_cycle_running(self) -> bool:
        return self._cycle_lock.locked()

    # ------------------------------------------------------------------
    # Read side (lock-free)
    # ------------------------------------------------------------------

    def current_view(self) -> AggregatedView | None:
        """Last published view, or None before the first successful cycle."""
        return self._store.view

    def scope_statuses(self) -> dict[str, ScopeStatus]:
        return dict(self._scope_states)

    def get_instance_history(self, namespace: str, name: str) -> InstanceHistory | None:
        identity = InstanceIdentity(namespace=namespace, name=name)
        view = self._store.view
        state = view.instance_states.get(identity.key) if view is not None else None
        return self._store.ledger.history(identity, state)

    def snapshot_diff(self) -> SnapshotDiff | None:
        """Live observations compared with the active snapshot, if any."""
        return self._store.baseline.diff_against_snapshot(self._store.all_observations())

    @property
    def active_snapshot(self) -> Snapshot | None:
        return self._store.baseline.snapshot

    # ------------------------------------------------------------------
    # Snapshot commands
    # ------------------------------------------------------------------

    async def take_snapshot(self, name: str | None = None) -> Snapshot:
        """Capture the current healthy population as the baseline.

        Raises:
            SnapshotError: If no cycle has completed yet or persisting fails.
        """
        async with self._store.writing():
            if self._store.completed_cycles == 0:
                raise SnapshotError(
                    f"No observations for domain {self.name!r} yet; poll first"
                )
            previous = self._store.baseline.snapshot
            snapshot = self._store.baseline.take_snapshot(
                name, self._store.all_observations(), self._clock()
            )
            if self._snapshot_store is not None:
                try:
                    self._snapshot_store.save(snapshot)
                except SnapshotError:
                    self._store.baseline.restore(previous)
                    raise
            self._republish_snapshot_fields_locked()
        return snapshot

    async def clear_snapshot(self) -> None:
        """Drop the active snapshot; the persisted file goes first.

        Raises:
            SnapshotError: If the persisted file cannot be deleted.
        """
        async with self._store.writing():
            if self._snapshot_store is not None:
                self._snapshot_store.delete()
            self._store.baseline.clear_snapshot()
            self._republish_snapshot_fields_locked()

    def _restore_snapshot(self) -> None:
        if self._snapshot_store is None:
            return
        try:
            snapshot = self._snapshot_store.load()
        except SnapshotError as exc:
            logger.warning("Ignoring persisted snapshot for %s: %s", self.name, exc)
            return
        if snapshot is not None:
            self._store.baseline.restore(snapshot)
            logger.info("Restored snapshot %r for %s", snapshot.name, self.name)

    # ------------------------------------------------------------------
    # State commands
    # ------------------------------------------------------------------

    async def reset_state(self, *, keep_snapshot: bool = True) -> None:
        """Forget observations, history and the published view."""
        async with self._cycle_lock, self._store.writing():
            self._store.reset_locked(keep_snapshot=keep_snapshot)
            self._scope_states.clear()
            if not keep_snapshot and self._snapshot_store is not None:
                self._snapshot_store.delete()
        logger.info("Monitoring state reset for %s", self.name)

    # ------------------------------------------------------------------
    # Poll loop
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self.is_running:
            return
        self._stopped = False
        self._stop_event.clear()
        self._loop_task = asyncio.create_task(
            self._run_loop(), name=f"kubevigil-poll-{self.name}"
        )
        logger.info(
            "Started polling %s every %ss", self.name, self._domain.poll_interval_seconds
        )

    async def stop(self, grace_timeout: float = STOP_GRACE_TIMEOUT_SECONDS) -> None:
        """Let an in-flight cycle finish, then prevent further cycles."""
        self._stopped = True
        self._stop_event.set()
        task = self._loop_task
        if task is not None:
            done, _ = await asyncio.wait({task}, timeout=grace_timeout)
            if not done:
                logger.warning("Poll loop for %s did not stop in time; cancelling", self.name)
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
            self._loop_task = None
        # Wait for a forced cycle that may still be running.
        async with self._cycle_lock:
            pass
        logger.info("Stopped polling %s", self.name)

    async def force_poll(self) -> CycleResult:
        """Run a cycle now unless one is already running."""
        return await self.poll_once()

    async def _run_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = float(self._domain.poll_interval_seconds)
        next_tick = loop.time()
        while not self._stop_event.is_set():
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Poll cycle for %s failed", self.name)

            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                missed = int((now - next_tick) // interval) + 1
                next_tick += missed * interval
                logger.debug("Skipped %d missed ticks for %s", missed, self.name)
            with suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=next_tick - now)

    async def poll_once(self) -> CycleResult:
        if self._stopped:
            return CycleResult(success=False, skipped=True, error="Controller is stopped")
        if self._cycle_lock.locked():
            logger.info("Cycle already running for %s; skipping", self.name)
            return CycleResult(success=False, skipped=True, error="Cycle already running")
        async with self._cycle_lock:
            return await self._run_cycle()

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def _run_cycle(self) -> CycleResult:
        self._start_timer()
        polled_at = self._clock()
        scopes = self.scopes
        for scope in scopes:
            self._update_scope_state(scope, FetchState.LOADING)

        try:
            result = await asyncio.wait_for(
                self._fetcher.fetch(scopes),
                timeout=self._domain.fetch_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return await self._publish_stale(
                scopes,
                FetchTimeoutError(
                    f"Fetch timed out after {self._domain.fetch_timeout_seconds}s"
                ),
            )
        except asyncio.CancelledError:
            for scope in scopes:
                self._update_scope_state(scope, FetchState.ERROR, "Fetch cancelled")
            raise
        except FetchError as exc:
            return await self._publish_stale(scopes, exc)
        except Exception as exc:
            logger.exception("Unexpected fetch failure for %s", self.name)
            return await self._publish_stale(scopes, exc)

        return await self._apply_fetch(scopes, result, polled_at)

    async def _apply_fetch(
        self, scopes: list[str], result: FetchResult, polled_at: datetime
    ) -> CycleResult:
        unrequested = sorted(set(result.records) - set(scopes))
        if unrequested:
            logger.warning(
                "Ignoring records for unrequested scopes of %s: %s",
                self.name,
                ", ".join(unrequested),
            )
        failed: dict[str, FetchError] = {}
        for scope in scopes:
            failure = result.failure_for(scope)
            if failure is not None:
                failed[scope] = failure
        succeeded = [scope for scope in scopes if scope not in failed]

        async with self._store.writing():
            previous = self._store.all_observations()

            for scope in succeeded:
                outcome = self._parser.parse_pods(result.records[scope], polled_at)
                self._store.observations_by_scope[scope] = tuple(outcome.observations)
                self._update_scope_state(
                    scope,
                    FetchState.SUCCESS,
                    polled_at=polled_at,
                    observation_count=len(outcome.observations),
                    malformed_count=outcome.malformed_count,
                )
                if outcome.malformed_count:
                    logger.warning(
                        "Excluded %d malformed observations in %s/%s",
                        outcome.malformed_count,
                        self.name,
                        scope,
                    )

            for scope, failure in failed.items():
                message = str(failure) or type(failure).__name__
                logger.warning("Scope %s/%s failed: %s", self.name, scope, message)
                self._update_scope_state(
                    scope, FetchState.ERROR, message, stale=True, failure_kind=failure.kind
                )

            if not succeeded:
                return self._republish_stale_locked(FetchError("Every scope failed"))

            current = self._store.all_observations()
            events = diff_observations(previous, current, polled_at)
            recorded = self._store.ledger.record(events)
            self._store.ledger.observe(current)
            self._store.ledger.trim(self._settings.history_max_events_per_instance)

            groups = aggregate_workloads(current)
            transitions = detect_workload_transitions(
                self._store.previous_workloads,
                groups,
                polled_at,
                first_cycle=self._store.completed_cycles == 0,
            )
            disappearances = detect_mass_disappearance(
                events,
                self._settings.mass_disappearance_threshold,
                polled_at,
                still_present={obs.identity for obs in current},
            )
            view = AggregatedView(
                domain=self.name,
                produced_at=polled_at,
                last_successful_poll=polled_at,
                stale=bool(failed),
                scopes=dict(self._scope_states),
                workloads=groups,
                recent_events=self._store.ledger.recent_events(
                    self._settings.recent_events_limit
                ),
                workload_transitions=transitions,
                disappearances=disappearances,
            )
            view = self._with_snapshot_fields(view, current, groups)
            published = self._store.publish_locked(view)
            self._store.previous_workloads = groups
            self._store.completed_cycles += 1

        logger.debug(
            "Cycle for %s: %d instances, %d workloads, %d events",
            self.name,
            len(current),
            len(groups),
            len(recorded),
        )
        return CycleResult(
            success=True,
            stale=published.stale,
            generation=published.generation,
            events_recorded=len(recorded),
            duration_ms=self._elapsed_ms(),
        )

    def _with_snapshot_fields(
        self,
        view: AggregatedView,
        current: list[InstanceObservation],
        groups: tuple[WorkloadGroup, ...],
    ) -> AggregatedView:
        """Fill in lifecycle states, statistics and snapshot name."""
        instance_states = self._derive_instance_states(current)
        statistics = build_statistics(
            current,
            groups,
            malformed_count=sum(
                status.malformed_count for status in self._scope_states.values()
            ),
            instance_states=instance_states,
            namespaces=self._domain.namespaces,
        )
        snapshot = self._store.baseline.snapshot
        return view.model_copy(
            update={
                "instance_states": instance_states,
                "statistics": statistics,
                "snapshot_name": snapshot.name if snapshot is not None else None,
            }
        )

    def _derive_instance_states(
        self, current: list[InstanceObservation]
    ) -> dict[str, InstanceLifecycleState]:
        """Lifecycle state of every known name slot.

        Missing-since-baseline wins over active, which wins over deleted.
        """
        present = {obs.identity for obs in current}
        snapshot_diff = self._store.baseline.diff_against_snapshot(current)
        missing = set(snapshot_diff.missing) if snapshot_diff is not None else set()

        states: dict[str, InstanceLifecycleState] = {}
        for identity in set(self._store.ledger.identities) | present | missing:
            if identity in missing:
                state = InstanceLifecycleState.MISSING_SINCE_BASELINE
            elif identity in present:
                state = InstanceLifecycleState.ACTIVE
            else:
                state = InstanceLifecycleState.DELETED
            states[identity.key] = state
        return dict(sorted(states.items()))

    def _republish_snapshot_fields_locked(self) -> None:
        view = self._store.view
        if view is None:
            return
        current = self._store.all_observations()
        self._store.publish_locked(
            self._with_snapshot_fields(view, current, view.workloads)
        )

    async def _publish_stale(self, scopes: list[str], error: Exception) -> CycleResult:
        message = str(error) or type(error).__name__
        kind = error.kind if isinstance(error, FetchError) else FetchFailureKind.TRANSIENT
        logger.warning("Fetch for %s failed (%s): %s", self.name, kind.value, message)
        for scope in scopes:
            self._update_scope_state(
                scope, FetchState.ERROR, message, stale=True, failure_kind=kind
            )
        async with self._store.writing():
            return self._republish_stale_locked(error)

    def _republish_stale_locked(self, error: Exception) -> CycleResult:
        """Keep the previous view, marked stale, instead of an empty one."""
        message = str(error) or type(error).__name__
        view = self._store.view
        generation = None
        if view is not None:
            generation = self._store.publish_locked(
                view.model_copy(update={"stale": True, "scopes": dict(self._scope_states)})
            ).generation
        return CycleResult(
            success=False,
            stale=True,
            generation=generation,
            error=message,
            duration_ms=self._elapsed_ms(),
        )

    def _update_scope_state(
        self,
        scope: str,
        state: FetchState,
        error_message: str | None = None,
        *,
        stale: bool = False,
        polled_at: datetime | None = None,
        observation_count: int | None = None,
        malformed_count: int | None = None,
        failure_kind: FetchFailureKind | None = None,
    ) -> None:
        """Update the fetch state for a scope."""
        current = self._scope_states.get(scope) or ScopeStatus(scope=scope)
        update: dict[str, object] = {
            "state": state,
            "error_message": error_message,
            "failure_kind": failure_kind,
            "stale": stale,
        }
        if state == FetchState.SUCCESS:
            update["last_successful_poll"] = polled_at or self._clock()
        if observation_count is not None:
            update["observation_count"] = observation_count
        if malformed_count is not None:
            update["malformed_count"] = malformed_count
        self._scope_states[scope] = current.model_copy(update=update)
