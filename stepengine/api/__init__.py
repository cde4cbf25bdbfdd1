"""Public stepengine API contracts."""

from stepengine.api.config import LoggingConfig, SchedulerConfig
from stepengine.api.errors import (
    InvalidHandlerError,
    InvocationError,
    ResolutionError,
    SchedulerError,
    UnknownTimerError,
)
from stepengine.api.events import EventEmitter, Listener, create_event_emitter
from stepengine.api.handlers import Handler, HandlerStack, create_handler_stack, validate_handler
from stepengine.api.invocation import Injector, Invoker, ValueResolver, create_injector
from stepengine.api.scheduler import Scheduler, SchedulerStats, create_scheduler
from stepengine.api.timers import Timer, TimerId, TimerRegistry, create_timer_registry

__all__ = [
    "EventEmitter",
    "Handler",
    "HandlerStack",
    "Injector",
    "InvalidHandlerError",
    "InvocationError",
    "Invoker",
    "Listener",
    "LoggingConfig",
    "ResolutionError",
    "Scheduler",
    "SchedulerConfig",
    "SchedulerError",
    "SchedulerStats",
    "Timer",
    "TimerId",
    "TimerRegistry",
    "UnknownTimerError",
    "ValueResolver",
    "create_event_emitter",
    "create_handler_stack",
    "create_injector",
    "create_scheduler",
    "create_timer_registry",
    "validate_handler",
]
