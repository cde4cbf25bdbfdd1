from __future__ import annotations

import stepengine
from stepengine.api.config import SchedulerConfig
from stepengine.runtime.events import RuntimeEventEmitter
from stepengine.runtime.injector import RuntimeInjector
from stepengine.runtime.scheduler import RuntimeScheduler


def test_package_create_scheduler_forwards_clock_and_sleep(clock) -> None:
    scheduler = stepengine.create_scheduler(time_source=clock.time, sleep=clock.sleep)
    fired: list[float] = []
    scheduler.add_timer_seconds(2.5, lambda: fired.append(clock.now))

    scheduler.step()

    assert isinstance(scheduler, RuntimeScheduler)
    assert scheduler.now() == clock.now
    assert clock.sleeps == [2.5]
    assert fired == [102.5]


def test_package_create_scheduler_forwards_config_and_collaborators(clock) -> None:
    injector = RuntimeInjector()
    emitter = RuntimeEventEmitter()

    scheduler = stepengine.create_scheduler(
        SchedulerConfig(busy_loop=True),
        injector=injector,
        emitter=emitter,
        time_source=clock.time,
        sleep=clock.sleep,
    )

    assert scheduler.busy_loop is True
    assert scheduler.injector is injector
    assert scheduler.emitter is emitter
    assert injector.resolve(RuntimeScheduler) is scheduler
