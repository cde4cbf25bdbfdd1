"""Public scheduler error taxonomy."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for scheduler errors."""


class InvalidHandlerError(SchedulerError, TypeError):
    """Raised when a non-callable value is registered as a handler."""


class UnknownTimerError(SchedulerError, LookupError):
    """Raised when an operation targets a timer id that is not registered."""

    def __init__(self, timer_id: str) -> None:
        super().__init__(f"unknown timer: {timer_id}")
        self.timer_id = timer_id


class InvocationError(SchedulerError):
    """Raised when a handler could not be invoked or failed while running."""

    def __init__(self, message: str, *, handler: object | None = None) -> None:
        super().__init__(message)
        self.handler = handler


class ResolutionError(InvocationError):
    """Raised when a handler parameter has no mapped value."""
