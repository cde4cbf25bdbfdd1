from __future__ import annotations

import threading
import time

import pytest

from stepengine.api.scheduler import create_scheduler
from stepengine.runtime.scheduler import RuntimeScheduler


@pytest.mark.slow
def test_recurring_timer_stops_after_fifth_firing_in_about_five_seconds() -> None:
    scheduler = create_scheduler()
    fired = 0
    pings: list[int] = []
    workers: list[threading.Thread] = []
    scheduler.emitter.on("ping", lambda count: pings.append(count))

    def tick(a: RuntimeScheduler) -> None:
        nonlocal fired
        fired += 1
        worker = threading.Thread(target=a.emit_sync, args=("ping", fired))
        workers.append(worker)
        worker.start()
        if fired > 4:
            a.stop()

    timer_id = scheduler.add_recurring_timer_seconds(1, tick)
    scheduler.set_duration(timer_id, 1.0)

    started = time.monotonic()
    scheduler.start()
    elapsed = time.monotonic() - started
    for worker in workers:
        worker.join(timeout=1.0)

    assert fired == 5
    assert sorted(pings) == [1, 2, 3, 4, 5]
    assert elapsed == pytest.approx(5.0, rel=0.05)
    scheduler.remove_timer(timer_id)
    assert scheduler.get_timer(timer_id) is None


@pytest.mark.slow
def test_stop_from_spawned_thread_ends_loop_after_blocking_wait() -> None:
    scheduler = create_scheduler()
    fired: list[str] = []
    stoppers: list[threading.Thread] = []

    def once(a: RuntimeScheduler) -> None:
        fired.append("once")
        stopper = threading.Thread(target=a.stop)
        stoppers.append(stopper)
        stopper.start()

    scheduler.add_timer_seconds(1, once)

    started = time.monotonic()
    scheduler.start()
    elapsed = time.monotonic() - started
    for stopper in stoppers:
        stopper.join(timeout=1.0)

    assert fired == ["once"]
    assert all(not stopper.is_alive() for stopper in stoppers)
    assert elapsed == pytest.approx(1.0, abs=0.25)
