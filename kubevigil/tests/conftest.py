"""Shared fixtures for KubeVigil tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from kubevigil.models.core.instance_info import InstanceObservation
from kubevigil.tests.helpers import SteppingClock, make_observation, make_pod


@pytest.fixture
def observation_factory() -> Callable[..., InstanceObservation]:
    return make_observation


@pytest.fixture
def pod_factory() -> Callable[..., dict[str, Any]]:
    return make_pod


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()
