"""Public timer registry API contracts."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeAlias

from stepengine.api.handlers import Handler

TimerId: TypeAlias = str


@dataclass(slots=True)
class Timer:
    """Live timer record owned by a registry.

    ``due_at`` is the next fire time on the scheduler clock. ``period`` is only
    read when a recurring timer is rescheduled, so changing it never moves the
    pending ``due_at``.
    """

    due_at: float
    period: float
    handler: Handler
    recurring: bool = False

    def after(self, period: float) -> None:
        """Set the span used for the next reschedule."""
        self.period = period


class TimerRegistry(Protocol):
    """Mapping of timer ids to live timer records."""

    def insert(
        self,
        timer_id: TimerId | None,
        due_at: float,
        period: float,
        recurring: bool,
        handler: Handler,
    ) -> TimerId:
        """Register timer, minting an id when none is given."""

    def remove(self, timer_id: TimerId) -> None:
        """Delete timer if present."""

    def get(self, timer_id: TimerId) -> Timer | None:
        """Return live timer record if present."""

    def set_period(self, timer_id: TimerId, period: float) -> None:
        """Change recurring span of an existing timer."""

    def soonest(self) -> tuple[TimerId, float] | None:
        """Return id and due time of the earliest timer."""

    def complete(self, timer_id: TimerId, timer: Timer, now: float) -> bool:
        """Reschedule or drop a timer that just fired."""

    def ids(self) -> tuple[TimerId, ...]:
        """Return snapshot of live timer ids."""

    def __len__(self) -> int: ...


def create_timer_registry(
    lock: threading.RLock | None = None,
    *,
    id_factory: Callable[[], TimerId] | None = None,
) -> TimerRegistry:
    """Create default timer registry implementation."""
    from stepengine.runtime.timers import RuntimeTimerRegistry

    return RuntimeTimerRegistry(lock=lock, id_factory=id_factory)
