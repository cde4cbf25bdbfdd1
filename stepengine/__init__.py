"""Embeddable cooperative step scheduler."""

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stepengine.api.config import SchedulerConfig
    from stepengine.api.events import EventEmitter
    from stepengine.api.invocation import Injector
    from stepengine.api.scheduler import Scheduler

__version__ = "0.1.0"


def create_scheduler(
    config: "SchedulerConfig | None" = None,
    *,
    injector: "Injector | None" = None,
    emitter: "EventEmitter | None" = None,
    time_source: Callable[[], float] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> "Scheduler":
    """Create a scheduler; omitted collaborators get runtime defaults."""
    from stepengine.api.scheduler import create_scheduler as api_create_scheduler

    return api_create_scheduler(
        config,
        injector=injector,
        emitter=emitter,
        time_source=time_source,
        sleep=sleep,
    )


__all__ = ["__version__", "create_scheduler"]
