"""Runtime implementations of the stepengine contracts."""

from stepengine.runtime.config import (
    load_logging_config,
    load_scheduler_config,
    resolve_log_level_name,
)
from stepengine.runtime.events import EventEmitter, RuntimeEventEmitter
from stepengine.runtime.handlers import HandlerStack, RuntimeHandlerStack
from stepengine.runtime.injector import RuntimeInjector
from stepengine.runtime.invocation import InvocationGateway
from stepengine.runtime.logging import (
    PACKAGE_LOGGER,
    JsonFormatter,
    configure_logging,
    create_scheduler_logger,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from stepengine.runtime.scheduler import RuntimeScheduler, Scheduler
from stepengine.runtime.timers import RuntimeTimerRegistry, TimerRegistry, mint_timer_id

__all__ = [
    "EventEmitter",
    "HandlerStack",
    "InvocationGateway",
    "JsonFormatter",
    "PACKAGE_LOGGER",
    "RuntimeEventEmitter",
    "RuntimeHandlerStack",
    "RuntimeInjector",
    "RuntimeScheduler",
    "RuntimeTimerRegistry",
    "Scheduler",
    "TimerRegistry",
    "configure_logging",
    "create_scheduler_logger",
    "get_logger",
    "load_logging_config",
    "load_scheduler_config",
    "mint_timer_id",
    "resolve_log_level_name",
    "setup_logging",
    "shutdown_logging",
]
