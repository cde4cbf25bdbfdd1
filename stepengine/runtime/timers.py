"""Timer registry implementation with soonest-due selection."""

from __future__ import annotations

import hashlib
import itertools
import threading
import time
from collections.abc import Callable

from stepengine.api.errors import UnknownTimerError
from stepengine.api.handlers import Handler, validate_handler
from stepengine.api.timers import Timer, TimerId

_MINT_SEQUENCE = itertools.count()


def mint_timer_id() -> TimerId:
    """Return an md5 id derived from the current high-resolution clock.

    The process-wide sequence number keeps two ids minted within one clock tick
    apart.
    """
    seed = f"{time.time_ns()}:{next(_MINT_SEQUENCE)}"
    return hashlib.md5(seed.encode("utf-8")).hexdigest()


class RuntimeTimerRegistry:
    """Lock-guarded mapping of timer ids to live timer records."""

    def __init__(
        self,
        *,
        lock: threading.RLock | None = None,
        id_factory: Callable[[], TimerId] | None = None,
    ) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._id_factory = id_factory or mint_timer_id
        self._timers: dict[TimerId, Timer] = {}

    def insert(
        self,
        timer_id: TimerId | None,
        due_at: float,
        period: float,
        recurring: bool,
        handler: Handler,
    ) -> TimerId:
        """Register timer; an existing timer with the same id is replaced."""
        timer = Timer(
            due_at=due_at,
            period=period,
            handler=validate_handler(handler),
            recurring=recurring,
        )
        resolved_id = timer_id or self._id_factory()
        with self._lock:
            self._timers[resolved_id] = timer
        return resolved_id

    def remove(self, timer_id: TimerId) -> None:
        with self._lock:
            self._timers.pop(timer_id, None)

    def get(self, timer_id: TimerId) -> Timer | None:
        with self._lock:
            return self._timers.get(timer_id)

    def set_period(self, timer_id: TimerId, period: float) -> None:
        with self._lock:
            timer = self._timers.get(timer_id)
            if timer is None:
                raise UnknownTimerError(timer_id)
            timer.period = period

    def soonest(self) -> tuple[TimerId, float] | None:
        """Linear scan for the earliest due timer; ties keep insertion order."""
        with self._lock:
            best: tuple[TimerId, float] | None = None
            for timer_id, timer in self._timers.items():
                if best is None or timer.due_at < best[1]:
                    best = (timer_id, timer.due_at)
            return best

    def complete(self, timer_id: TimerId, timer: Timer, now: float) -> bool:
        """Apply post-fire bookkeeping unless the timer was removed or replaced."""
        with self._lock:
            if self._timers.get(timer_id) is not timer:
                return False
            if timer.recurring:
                timer.due_at = now + timer.period
                return True
            del self._timers[timer_id]
            return False

    def ids(self) -> tuple[TimerId, ...]:
        with self._lock:
            return tuple(self._timers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)


TimerRegistry = RuntimeTimerRegistry
