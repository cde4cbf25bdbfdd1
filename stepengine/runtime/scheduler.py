"""Cooperative step scheduler: per-tick handlers plus soonest-first timers."""

from __future__ import annotations

import functools
import logging
import threading
import time
from collections.abc import Callable, Hashable

from stepengine.api.config import SchedulerConfig
from stepengine.api.errors import InvocationError
from stepengine.api.events import EventEmitter as EventEmitterContract
from stepengine.api.events import Listener
from stepengine.api.handlers import Handler, describe_handler, validate_handler
from stepengine.api.invocation import Injector
from stepengine.api.scheduler import Scheduler as SchedulerContract
from stepengine.api.scheduler import SchedulerStats
from stepengine.api.timers import Timer, TimerId
from stepengine.runtime.events import RuntimeEventEmitter
from stepengine.runtime.handlers import RuntimeHandlerStack
from stepengine.runtime.injector import RuntimeInjector
from stepengine.runtime.invocation import InvocationGateway
from stepengine.runtime.logging import create_scheduler_logger
from stepengine.runtime.timers import RuntimeTimerRegistry


def _check_seconds(seconds: float) -> float:
    if seconds < 0.0:
        raise ValueError("seconds must be >= 0")
    return float(seconds)


class RuntimeScheduler:
    """Runs a handler stack every step and fires at most one due timer per step.

    One re-entrant lock guards the handler stack and the timer registry, so
    handlers and threads they spawn may register, change or remove timers and
    handlers at any time. Handlers always run outside that lock. ``start`` only
    observes ``stop`` between steps: in the default blocking mode the worst-case
    stop latency is the longest pending timer wait.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        *,
        injector: Injector | None = None,
        emitter: EventEmitterContract | None = None,
        time_source: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        cfg = config or SchedulerConfig()
        self.busy_loop = cfg.busy_loop
        self.fatal = cfg.fatal
        self._time_source = time_source or time.monotonic
        self._sleep = sleep or time.sleep

        self._lock = threading.RLock()
        self._started_lock = threading.Lock()
        self._started = False
        self._handlers = RuntimeHandlerStack(lock=self._lock)
        self._timers = RuntimeTimerRegistry(lock=self._lock)

        self._logger = create_scheduler_logger(
            cfg.logger_name, stream=cfg.log_stream, fmt=cfg.log_format
        )
        self._emitter = emitter if emitter is not None else RuntimeEventEmitter()
        self._injector = injector if injector is not None else RuntimeInjector()
        self._gateway = InvocationGateway(self._injector)

        self._steps = 0
        self._handler_runs = 0
        self._timers_fired = 0
        self._errors_suppressed = 0

        self._injector.map(self)
        self._injector.map_to(self, SchedulerContract)
        self._injector.map_to(self._logger, logging.Logger)
        self._injector.map(self._emitter)
        self._injector.map_to(self._emitter, EventEmitterContract)
        self._injector.map_to(self._injector, Injector)

    @property
    def injector(self) -> Injector:
        return self._injector

    @property
    def emitter(self) -> EventEmitterContract:
        """Raw emitter; its listeners receive emitted arguments without injection."""
        return self._emitter

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def now(self) -> float:
        """Return the scheduler clock reading used for timer due times."""
        return self._time_source()

    def map(self, value: object) -> None:
        self._injector.map(value)

    def map_to(self, value: object, token: object) -> None:
        self._injector.map_to(value, token)

    # Handler stack

    def use(self, handler: Handler) -> None:
        """Append a per-step handler; handlers run in the order they were added."""
        self._handlers.use(handler)

    def set_handlers(self, *handlers: Handler) -> None:
        """Replace the handler stack; no arguments clears it."""
        self._handlers.set_all(*handlers)

    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers.handlers()

    # Timers

    def timer(
        self,
        timer_id: TimerId | None,
        due_at: float,
        period: float,
        recurring: bool,
        handler: Handler,
    ) -> TimerId:
        """Register a timer due at ``due_at`` on the scheduler clock.

        An empty ``timer_id`` mints a new one. Reusing the id of a live timer
        replaces that timer.
        """
        resolved_id = self._timers.insert(timer_id, due_at, period, recurring, handler)
        self._logger.debug(
            "timer registered id=%s recurring=%s period=%.3fs", resolved_id, recurring, period
        )
        return resolved_id

    def timer_seconds(self, seconds: float, recurring: bool, handler: Handler) -> TimerId:
        span = _check_seconds(seconds)
        validate_handler(handler)
        return self.timer(None, self._time_source() + span, span, recurring, handler)

    def add_timer_seconds(self, seconds: float, handler: Handler) -> TimerId:
        return self.timer_seconds(seconds, False, handler)

    def add_recurring_timer_seconds(self, seconds: float, handler: Handler) -> TimerId:
        return self.timer_seconds(seconds, True, handler)

    def next_tick(self, handler: Handler) -> TimerId:
        """Run handler once, on the next step that reaches the timers."""
        return self.add_timer_seconds(0.0, handler)

    def remove_timer(self, timer_id: TimerId) -> None:
        self._timers.remove(timer_id)
        self._logger.debug("timer removed id=%s", timer_id)

    def get_timer(self, timer_id: TimerId) -> Timer | None:
        return self._timers.get(timer_id)

    def set_duration(self, timer_id: TimerId, period: float) -> TimerId:
        """Change the span applied on the timer's next reschedule."""
        self._timers.set_period(timer_id, _check_seconds(period))
        return timer_id

    def timer_ids(self) -> tuple[TimerId, ...]:
        return self._timers.ids()

    # Events

    def on(self, event: Hashable, listener: Listener) -> Listener:
        """Register listener invoked with injected scheduler services."""
        self._emitter.on(event, self._bind_listener(listener))
        return listener

    def once(self, event: Hashable, listener: Listener) -> Listener:
        self._emitter.once(event, self._bind_listener(listener))
        return listener

    def off(self, event: Hashable, listener: Listener) -> None:
        self._emitter.off(event, listener)

    def emit(self, event: Hashable, *args: object) -> int:
        return self._emitter.emit(event, *args)

    def emit_sync(self, event: Hashable, *args: object) -> int:
        return self._emitter.emit_sync(event, *args)

    def _bind_listener(self, listener: Listener) -> Listener:
        validate_handler(listener)

        @functools.wraps(listener)
        def bound(*args: object) -> None:
            injector = self._injector.create_child()
            for value in args:
                injector.map(value)
            self._dispatch(listener, invoker=injector)

        return bound

    # Lifecycle

    def is_started(self) -> bool:
        with self._started_lock:
            return self._started

    def start(self) -> None:
        """Loop steps until ``stop``; a no-op while already running."""
        with self._started_lock:
            if self._started:
                return
            self._started = True
        self._logger.debug("scheduler started")
        try:
            while self.is_started():
                self.step()
        finally:
            with self._started_lock:
                self._started = False
            self._logger.debug("scheduler stopped")

    def stop(self) -> None:
        """Ask ``start`` to return once the current step completes."""
        with self._started_lock:
            self._started = False

    def run_loop(self) -> None:
        """Step forever; ``stop`` has no effect here."""
        while True:
            self.step()

    def step(self) -> None:
        """Run every handler, then fire the soonest timer once it is due.

        In busy-loop mode a timer that is not yet due is left pending and the
        step returns immediately.
        """
        with self._lock:
            self._steps += 1
        self._handlers.run_all(self._run_handler)

        if not len(self._timers):
            return
        soonest = self._timers.soonest()
        if soonest is None:
            return
        timer_id, due_at = soonest

        remaining = due_at - self._time_source()
        if remaining > 0.0:
            if self.busy_loop:
                return
            self._sleep(remaining)

        timer = self._timers.get(timer_id)
        if timer is None:
            self._logger.debug("timer vanished before firing id=%s", timer_id)
            return
        try:
            self._dispatch(timer.handler)
        finally:
            self._timers.complete(timer_id, timer, self._time_source())
            with self._lock:
                self._timers_fired += 1

    def stats(self) -> SchedulerStats:
        with self._lock:
            return SchedulerStats(
                steps=self._steps,
                handler_runs=self._handler_runs,
                timers_fired=self._timers_fired,
                errors_suppressed=self._errors_suppressed,
            )

    def _run_handler(self, handler: Handler) -> None:
        with self._lock:
            self._handler_runs += 1
        self._dispatch(handler)

    def _dispatch(self, handler: Handler, *, invoker: Injector | None = None) -> None:
        gateway = self._gateway if invoker is None else InvocationGateway(invoker)
        try:
            gateway.invoke(handler)
        except InvocationError:
            if self.fatal:
                raise
            with self._lock:
                self._errors_suppressed += 1
            self._logger.exception("handler %s failed", describe_handler(handler))


Scheduler = RuntimeScheduler
