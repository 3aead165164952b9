"""Tests for health scoring."""

from __future__ import annotations

import itertools

import pytest

from kubevigil.constants.enums import NamespaceHealth, Severity
from kubevigil.controllers.workloads.scoring.health_scorer import (
    classify_severity,
    composite_score,
    namespace_health,
)


class TestCompositeScore:
    """Tests for composite_score."""

    def test_all_healthy_scores_100(self) -> None:
        assert composite_score(total=3, running=3, ready=3, failed=0) == 100

    def test_empty_group_has_no_score(self) -> None:
        assert composite_score(total=0, running=0, ready=0, failed=0) is None

    def test_web_group_with_one_pending(self) -> None:
        # 2/3*40 + 2/3*40 + 20 = 73.33
        assert composite_score(total=3, running=2, ready=2, failed=0) == 73

    def test_rounds_half_up(self) -> None:
        # 3/8*40 + 3/8*40 + 20 = 50
        assert composite_score(total=8, running=3, ready=3, failed=0) == 50
        # 1/16*40 = 2.5 -> 3
        assert composite_score(total=16, running=1, ready=0, failed=0) == 23

    def test_failures_consume_budget(self) -> None:
        # 4/5*40 + 4/5*40 + max(0, 20 - 20) = 64
        assert composite_score(total=5, running=4, ready=4, failed=1) == 64

    def test_scores_stay_in_bounds(self) -> None:
        for total in range(1, 7):
            for running, ready, failed in itertools.product(range(total + 1), repeat=3):
                if ready > running or running + failed > total:
                    continue
                score = composite_score(total, running, ready, failed)
                assert score is not None
                assert 0 <= score <= 100


class TestClassifySeverity:
    """Tests for classify_severity."""

    @pytest.mark.parametrize(
        ("total", "ready", "pending", "failed", "expected"),
        [
            (0, 0, 0, 0, Severity.EMPTY),
            (3, 3, 0, 0, Severity.HEALTHY),
            (3, 2, 1, 0, Severity.WARNING),
            (5, 4, 0, 0, Severity.HEALTHY),
            (5, 3, 0, 0, Severity.WARNING),
            (4, 1, 0, 0, Severity.CRITICAL),
            (3, 3, 0, 1, Severity.CRITICAL),
            (2, 1, 1, 0, Severity.WARNING),
        ],
    )
    def test_thresholds(
        self, total: int, ready: int, pending: int, failed: int, expected: Severity
    ) -> None:
        assert classify_severity(total, ready, pending, failed) == expected


class TestNamespaceHealth:
    """Tests for namespace health buckets."""

    def test_empty_namespace_is_healthy(self) -> None:
        assert namespace_health(0, 0) == (100, NamespaceHealth.HEALTHY)

    def test_buckets(self) -> None:
        assert namespace_health(10, 9) == (90, NamespaceHealth.HEALTHY)
        assert namespace_health(10, 7) == (70, NamespaceHealth.WARNING)
        assert namespace_health(10, 6) == (60, NamespaceHealth.CRITICAL)
