from __future__ import annotations

from collections.abc import Callable

import pytest

from stepengine.api.config import SchedulerConfig
from stepengine.runtime.scheduler import RuntimeScheduler


class FakeClock:
    """Manual clock whose sleep advances time instantly."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_scheduler(clock: FakeClock) -> Callable[..., RuntimeScheduler]:
    def _make(**config_values: object) -> RuntimeScheduler:
        config = SchedulerConfig(**config_values)
        return RuntimeScheduler(config, time_source=clock.time, sleep=clock.sleep)

    return _make
