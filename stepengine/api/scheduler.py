"""Public step scheduler API contracts."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from stepengine.api.config import SchedulerConfig
from stepengine.api.events import EventEmitter, Listener
from stepengine.api.handlers import Handler
from stepengine.api.invocation import Injector
from stepengine.api.timers import Timer, TimerId


@dataclass(frozen=True, slots=True)
class SchedulerStats:
    """Cumulative activity counters of one scheduler."""

    steps: int
    handler_runs: int
    timers_fired: int
    errors_suppressed: int


@runtime_checkable
class Scheduler(Protocol):
    """Cooperative step scheduler: per-tick handlers plus soonest-first timers."""

    busy_loop: bool
    fatal: bool

    @property
    def injector(self) -> Injector: ...

    @property
    def emitter(self) -> EventEmitter: ...

    @property
    def logger(self) -> logging.Logger: ...

    def use(self, handler: Handler) -> None:
        """Append a per-tick handler."""

    def set_handlers(self, *handlers: Handler) -> None:
        """Replace the per-tick handler stack."""

    def timer(
        self,
        timer_id: TimerId | None,
        due_at: float,
        period: float,
        recurring: bool,
        handler: Handler,
    ) -> TimerId:
        """Register a timer due at an absolute scheduler-clock instant."""

    def timer_seconds(self, seconds: float, recurring: bool, handler: Handler) -> TimerId:
        """Register a timer due after seconds."""

    def add_timer_seconds(self, seconds: float, handler: Handler) -> TimerId:
        """Register a one-shot timer."""

    def add_recurring_timer_seconds(self, seconds: float, handler: Handler) -> TimerId:
        """Register a recurring timer."""

    def next_tick(self, handler: Handler) -> TimerId:
        """Register a one-shot timer that is already due."""

    def remove_timer(self, timer_id: TimerId) -> None:
        """Remove timer if present."""

    def get_timer(self, timer_id: TimerId) -> Timer | None:
        """Return live timer record if present."""

    def set_duration(self, timer_id: TimerId, period: float) -> TimerId:
        """Change the span used on the next reschedule."""

    def on(self, event: Hashable, listener: Listener) -> Listener:
        """Register an injected listener."""

    def once(self, event: Hashable, listener: Listener) -> Listener:
        """Register an injected one-shot listener."""

    def emit(self, event: Hashable, *args: object) -> int:
        """Emit event to listeners concurrently."""

    def emit_sync(self, event: Hashable, *args: object) -> int:
        """Emit event to listeners sequentially."""

    def step(self) -> None:
        """Run one tick."""

    def start(self) -> None:
        """Loop steps until stopped."""

    def stop(self) -> None:
        """Request the start loop to exit."""

    def is_started(self) -> bool:
        """Return whether the start loop is running."""

    def run_loop(self) -> None:
        """Loop steps forever."""

    def stats(self) -> SchedulerStats:
        """Return activity counters snapshot."""


def create_scheduler(
    config: SchedulerConfig | None = None,
    *,
    injector: Injector | None = None,
    emitter: EventEmitter | None = None,
    time_source: Callable[[], float] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Scheduler:
    """Create default scheduler implementation."""
    from stepengine.runtime.scheduler import RuntimeScheduler

    return RuntimeScheduler(
        config,
        injector=injector,
        emitter=emitter,
        time_source=time_source,
        sleep=sleep,
    )
