"""Tests for the workload monitor controller."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from kubevigil.constants.enums import (
    FetchFailureKind,
    FetchState,
    InstanceLifecycleState,
    InstanceStatus,
    LifecycleEventKind,
    Severity,
    WorkloadTransitionKind,
)
from kubevigil.controllers.workloads.controller import WorkloadMonitorController
from kubevigil.controllers.workloads.fetchers import (
    FetchAuthError,
    FetchError,
    FetchResult,
    ObservationFetcher,
    TransientFetchError,
)
from kubevigil.controllers.workloads.snapshot import SnapshotError, SnapshotStore
from kubevigil.models.state.app_settings import AppSettings, DomainSettings
from kubevigil.tests.helpers import ScriptedFetcher, SteppingClock, make_pod


def _domain(namespaces: list[str] | None = None, **overrides: float) -> DomainSettings:
    # model_construct bypasses the minimum interval so tests stay fast.
    return DomainSettings.model_construct(
        name="test",
        namespaces=namespaces if namespaces is not None else ["prod"],
        poll_interval_seconds=overrides.get("poll_interval_seconds", 15.0),
        fetch_timeout_seconds=overrides.get("fetch_timeout_seconds", 5.0),
        enabled=True,
    )


def _result(scope: str = "prod", *pods: dict) -> FetchResult:
    return FetchResult(records={scope: list(pods)})


def _controller(
    fetcher: ObservationFetcher,
    domain: DomainSettings | None = None,
    settings: AppSettings | None = None,
    **kwargs,
) -> WorkloadMonitorController:
    domain = domain or _domain()
    return WorkloadMonitorController(
        fetcher,
        domain,
        settings or AppSettings(domains=[domain]),
        clock=kwargs.pop("clock", SteppingClock()),
        **kwargs,
    )


class _BlockingFetcher(ObservationFetcher):
    """Fetcher whose fetch waits until released."""

    def __init__(self, result: FetchResult) -> None:
        self.result = result
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.calls = 0

    async def fetch(self, scopes: Sequence[str]) -> FetchResult:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.result


class TestCycle:
    """Tests for a single poll cycle."""

    @pytest.mark.asyncio
    async def test_first_cycle_publishes_view(self) -> None:
        fetcher = ScriptedFetcher(
            [
                _result(
                    "prod",
                    make_pod("web-7949dd6859-9llzn", namespace="prod"),
                    make_pod(
                        "web-7949dd6859-abcde",
                        namespace="prod",
                        phase="Pending",
                        ready=[False],
                    ),
                )
            ]
        )
        controller = _controller(fetcher)

        result = await controller.force_poll()

        assert result.success is True
        assert result.generation == 1
        assert result.events_recorded == 2
        view = controller.current_view()
        assert view is not None
        assert view.stale is False
        assert view.domain == "test"
        assert fetcher.calls == [["prod"]]
        web = view.find_workload("prod", "web")
        assert web is not None
        assert (web.total, web.running, web.ready, web.pending) == (2, 1, 1, 1)
        assert web.severity == Severity.WARNING
        assert view.scopes["prod"].state == FetchState.SUCCESS
        assert view.scopes["prod"].last_successful_poll == view.last_successful_poll
        assert [e.kind for e in view.recent_events] == [LifecycleEventKind.CREATED] * 2
        assert view.workload_transitions == ()

    @pytest.mark.asyncio
    async def test_status_change_recorded_in_history(self) -> None:
        fetcher = ScriptedFetcher(
            [
                _result("prod", make_pod("web-a-1", namespace="prod")),
                _result("prod", make_pod("web-a-1", namespace="prod", phase="Failed", ready=[False])),
            ]
        )
        controller = _controller(fetcher)

        await controller.force_poll()
        await controller.force_poll()

        history = controller.get_instance_history("prod", "web-a-1")
        assert history is not None
        changes = [e for e in history.events if e.kind == LifecycleEventKind.STATUS_CHANGE]
        assert len(changes) == 1
        assert changes[0].previous_status == InstanceStatus.RUNNING
        assert changes[0].new_status == InstanceStatus.FAILED
        assert history.current_status == InstanceStatus.FAILED
        assert history.lifecycle_state == InstanceLifecycleState.ACTIVE
        view = controller.current_view()
        assert view is not None
        assert [t.kind for t in view.workload_transitions] == [WorkloadTransitionKind.FAILED]

    @pytest.mark.asyncio
    async def test_deleted_instance_state(self) -> None:
        fetcher = ScriptedFetcher(
            [
                _result("prod", make_pod("web-a-1", namespace="prod"), make_pod("web-a-2", namespace="prod")),
                _result("prod", make_pod("web-a-1", namespace="prod")),
            ]
        )
        controller = _controller(fetcher)

        await controller.force_poll()
        await controller.force_poll()

        view = controller.current_view()
        assert view is not None
        assert view.instance_states["prod/web-a-2"] == InstanceLifecycleState.DELETED
        assert view.instance_states["prod/web-a-1"] == InstanceLifecycleState.ACTIVE
        assert view.statistics.deleted_instances == 1
        history = controller.get_instance_history("prod", "web-a-2")
        assert history is not None
        assert history.deleted_at is not None

    @pytest.mark.asyncio
    async def test_malformed_records_are_counted(self) -> None:
        broken = make_pod("broken", namespace="prod")
        del broken["metadata"]["creationTimestamp"]
        controller = _controller(
            ScriptedFetcher([_result("prod", make_pod("web-a-1", namespace="prod"), broken)])
        )

        await controller.force_poll()

        view = controller.current_view()
        assert view is not None
        assert view.statistics.total_instances == 1
        assert view.statistics.malformed_observations == 1
        assert view.scopes["prod"].malformed_count == 1

    @pytest.mark.asyncio
    async def test_mass_disappearance(self) -> None:
        pods = [make_pod(f"web-a-{i}", namespace="prod") for i in range(3)]
        controller = _controller(ScriptedFetcher([_result("prod", *pods), _result("prod")]))

        await controller.force_poll()
        await controller.force_poll()

        view = controller.current_view()
        assert view is not None
        assert len(view.disappearances) == 1
        assert view.disappearances[0].instance_count == 3
        assert [t.kind for t in view.workload_transitions] == [WorkloadTransitionKind.STOPPED]


class TestFetchFailures:
    """Tests for timeouts, failed and partial fetches."""

    @pytest.mark.asyncio
    async def test_timed_out_fetch_keeps_previous_view_stale(self) -> None:
        domain = _domain(fetch_timeout_seconds=0.05)
        fetcher = AsyncMock(spec=ObservationFetcher)
        fetcher.fetch.return_value = _result("prod", make_pod("web-a-1", namespace="prod"))
        controller = _controller(fetcher, domain)

        await controller.force_poll()
        previous = controller.current_view()

        async def _hang(scopes: Sequence[str]) -> FetchResult:
            await asyncio.sleep(10)
            return FetchResult()

        fetcher.fetch.side_effect = _hang
        result = await controller.force_poll()

        current = controller.current_view()
        assert result.success is False
        assert result.stale is True
        assert "timed out" in (result.error or "")
        assert previous is not None and current is not None
        assert current.stale is True
        assert current.workloads == previous.workloads
        assert current.statistics == previous.statistics
        assert current.recent_events == previous.recent_events
        assert current.last_successful_poll == previous.last_successful_poll
        assert current.scopes["prod"].state == FetchState.ERROR
        assert current.scopes["prod"].stale is True

    @pytest.mark.asyncio
    async def test_failure_before_first_success_publishes_nothing(self) -> None:
        controller = _controller(ScriptedFetcher([FetchAuthError("forbidden")]))

        result = await controller.force_poll()

        assert result.success is False
        assert result.generation is None
        assert controller.current_view() is None
        assert controller.scope_statuses()["prod"].error_message == "forbidden"

    @pytest.mark.asyncio
    async def test_failed_fetch_emits_no_events(self) -> None:
        controller = _controller(
            ScriptedFetcher(
                [
                    _result("prod", make_pod("web-a-1", namespace="prod")),
                    TransientFetchError("connection reset"),
                    _result("prod", make_pod("web-a-1", namespace="prod")),
                ]
            )
        )

        await controller.force_poll()
        await controller.force_poll()
        result = await controller.force_poll()

        assert result.success is True
        assert result.events_recorded == 0
        view = controller.current_view()
        assert view is not None
        assert view.stale is False

    @pytest.mark.asyncio
    async def test_partial_fetch_keeps_failed_scope(self) -> None:
        domain = _domain(["prod", "stage"])
        first = FetchResult(
            records={
                "prod": [make_pod("web-a-1", namespace="prod")],
                "stage": [make_pod("api-b-1", namespace="stage")],
            }
        )
        second = FetchResult(
            records={"prod": [make_pod("web-a-1", namespace="prod")]},
            failed_scopes={"stage": "connection refused"},
        )
        controller = _controller(ScriptedFetcher([first, second]), domain)

        await controller.force_poll()
        result = await controller.force_poll()

        view = controller.current_view()
        assert result.success is True
        assert result.events_recorded == 0
        assert view is not None
        assert view.stale is True
        assert view.stale_scopes == ["stage"]
        assert view.find_workload("stage", "api") is not None
        assert view.scopes["prod"].state == FetchState.SUCCESS
        assert view.scopes["stage"].error_message == "connection refused"
        assert view.scopes["stage"].last_successful_poll is not None


    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (FetchAuthError("forbidden"), FetchFailureKind.AUTH),
            (TransientFetchError("connection reset"), FetchFailureKind.TRANSIENT),
        ],
    )
    async def test_failure_kind_recorded_per_scope(
        self, error: FetchError, kind: FetchFailureKind
    ) -> None:
        controller = _controller(
            ScriptedFetcher([_result("prod", make_pod("web-a-1", namespace="prod")), error])
        )

        await controller.force_poll()
        await controller.force_poll()

        status = controller.scope_statuses()["prod"]
        assert status.failure_kind == kind
        view = controller.current_view()
        assert view is not None
        assert view.scopes["prod"].failure_kind == kind

    @pytest.mark.asyncio
    async def test_timeout_recorded_as_timeout_kind(self) -> None:
        fetcher = AsyncMock(spec=ObservationFetcher)

        async def _hang(scopes: Sequence[str]) -> FetchResult:
            await asyncio.sleep(10)
            return FetchResult()

        fetcher.fetch.side_effect = _hang
        controller = _controller(fetcher, _domain(fetch_timeout_seconds=0.05))

        await controller.force_poll()

        assert controller.scope_statuses()["prod"].failure_kind == FetchFailureKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_typed_kind(self) -> None:
        domain = _domain(["prod", "stage"])
        result = FetchResult(
            records={"prod": [make_pod("web-a-1", namespace="prod")]},
            failed_scopes={"stage": FetchAuthError("namespace forbidden")},
        )
        controller = _controller(ScriptedFetcher([result]), domain)

        await controller.force_poll()

        statuses = controller.scope_statuses()
        assert statuses["prod"].failure_kind is None
        assert statuses["stage"].failure_kind == FetchFailureKind.AUTH
        assert statuses["stage"].error_message == "namespace forbidden"

    @pytest.mark.asyncio
    async def test_success_clears_failure_kind(self) -> None:
        controller = _controller(
            ScriptedFetcher(
                [
                    FetchAuthError("forbidden"),
                    _result("prod", make_pod("web-a-1", namespace="prod")),
                ]
            )
        )

        await controller.force_poll()
        await controller.force_poll()

        assert controller.scope_statuses()["prod"].failure_kind is None

    @pytest.mark.asyncio
    async def test_unrequested_scope_records_ignored(self) -> None:
        result = FetchResult(
            records={
                "prod": [make_pod("web-a-1", namespace="prod")],
                "kube-system": [make_pod("dns-a-1", namespace="kube-system")],
            }
        )
        controller = _controller(ScriptedFetcher([result]))

        await controller.force_poll()

        view = controller.current_view()
        assert view is not None
        assert list(view.scopes) == ["prod"]
        assert view.find_workload("kube-system", "dns") is None
        assert view.statistics.total_instances == 1


class TestSnapshots:
    """Tests for snapshot commands on the controller."""

    @pytest.mark.asyncio
    async def test_snapshot_before_first_poll_fails(self) -> None:
        controller = _controller(ScriptedFetcher([_result("prod")]))
        with pytest.raises(SnapshotError):
            await controller.take_snapshot("base")

    @pytest.mark.asyncio
    async def test_three_to_two_missing(self) -> None:
        pods = [make_pod(f"web-a-{i}", namespace="prod") for i in range(3)]
        controller = _controller(ScriptedFetcher([_result("prod", *pods), _result("prod", *pods[:2])]))

        await controller.force_poll()
        snapshot = await controller.take_snapshot("base")
        await controller.force_poll()

        diff = controller.snapshot_diff()
        assert snapshot.included_count == 3
        assert diff is not None
        assert diff.missing_count == 1
        assert diff.new_count == 0
        view = controller.current_view()
        assert view is not None
        assert view.snapshot_name == "base"
        assert view.instance_states["prod/web-a-2"] == InstanceLifecycleState.MISSING_SINCE_BASELINE
        assert view.statistics.missing_since_baseline == 1

    @pytest.mark.asyncio
    async def test_clear_snapshot(self) -> None:
        controller = _controller(ScriptedFetcher([_result("prod", make_pod("a", namespace="prod"))]))
        await controller.force_poll()
        await controller.take_snapshot(None)

        await controller.clear_snapshot()

        assert controller.snapshot_diff() is None
        view = controller.current_view()
        assert view is not None
        assert view.snapshot_name is None

    @pytest.mark.asyncio
    async def test_snapshot_persisted_and_restored(self, tmp_path: Path) -> None:
        store = SnapshotStore(tmp_path / "snapshot.json")
        fetcher = ScriptedFetcher([_result("prod", make_pod("a", namespace="prod"))])
        controller = _controller(fetcher, snapshot_store=store)
        await controller.force_poll()
        await controller.take_snapshot("persisted")

        restored = _controller(fetcher, snapshot_store=SnapshotStore(store.path))

        assert restored.active_snapshot is not None
        assert restored.active_snapshot.name == "persisted"


    @pytest.mark.asyncio
    async def test_failed_save_keeps_previous_snapshot(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = SnapshotStore(blocker / "snapshot.json")
        controller = _controller(
            ScriptedFetcher([_result("prod", make_pod("a", namespace="prod"))]),
            snapshot_store=store,
        )
        await controller.force_poll()

        with pytest.raises(SnapshotError):
            await controller.take_snapshot("base")

        assert controller.active_snapshot is None
        assert controller.snapshot_diff() is None
        view = controller.current_view()
        assert view is not None
        assert view.snapshot_name is None

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_snapshot(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        controller = _controller(
            ScriptedFetcher([_result("prod", make_pod("a", namespace="prod"))]),
            snapshot_store=SnapshotStore(path),
        )
        await controller.force_poll()
        await controller.take_snapshot("base")
        # A directory in place of the file makes unlink fail.
        path.unlink()
        path.mkdir()

        with pytest.raises(SnapshotError):
            await controller.clear_snapshot()

        assert controller.active_snapshot is not None
        assert controller.active_snapshot.name == "base"
        view = controller.current_view()
        assert view is not None
        assert view.snapshot_name == "base"


class TestLoop:
    """Tests for overlap prevention, start and stop."""

    @pytest.mark.asyncio
    async def test_force_poll_skipped_while_cycle_runs(self) -> None:
        fetcher = _BlockingFetcher(_result("prod"))
        controller = _controller(fetcher)

        first = asyncio.create_task(controller.force_poll())
        await fetcher.started.wait()
        skipped = await controller.force_poll()
        fetcher.release.set()
        completed = await first

        assert skipped.skipped is True
        assert skipped.success is False
        assert completed.success is True
        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_stop_lets_in_flight_cycle_finish(self) -> None:
        fetcher = _BlockingFetcher(_result("prod", make_pod("a", namespace="prod")))
        controller = _controller(fetcher)

        await controller.start()
        await fetcher.started.wait()
        stopping = asyncio.create_task(controller.stop())
        await asyncio.sleep(0)
        fetcher.release.set()
        await stopping

        assert controller.is_running is False
        view = controller.current_view()
        assert view is not None
        assert view.generation == 1
        after_stop = await controller.force_poll()
        assert after_stop.skipped is True
        assert fetcher.calls == 1

    @pytest.mark.asyncio
    async def test_loop_polls_repeatedly(self) -> None:
        fetcher = ScriptedFetcher([_result("prod")])
        controller = _controller(fetcher, _domain(poll_interval_seconds=0.01))

        await controller.start()
        await asyncio.sleep(0.1)
        await controller.stop()

        assert len(fetcher.calls) >= 2

    @pytest.mark.asyncio
    async def test_reset_state(self) -> None:
        controller = _controller(ScriptedFetcher([_result("prod", make_pod("a", namespace="prod"))]))
        await controller.force_poll()
        await controller.take_snapshot("base")

        await controller.reset_state()

        assert controller.current_view() is None
        assert controller.get_instance_history("prod", "a") is None
        assert controller.active_snapshot is not None
        result = await controller.force_poll()
        assert result.events_recorded == 1
