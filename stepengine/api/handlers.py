"""Public handler stack API contracts."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, TypeAlias

from stepengine.api.errors import InvalidHandlerError

Handler: TypeAlias = Callable[..., object]
HandlerDispatch: TypeAlias = Callable[[Handler], object]


def validate_handler(handler: object) -> Handler:
    """Return handler unchanged or raise when it is not callable."""
    if not callable(handler):
        raise InvalidHandlerError(
            f"handler must be callable, got {type(handler).__name__}: {handler!r}"
        )
    return handler


def describe_handler(handler: object) -> str:
    """Return a short printable name for logs and error messages."""
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    if name:
        return str(name)
    return type(handler).__qualname__


class HandlerStack(Protocol):
    """Ordered middleware stack run once per scheduler step."""

    def use(self, handler: Handler) -> None:
        """Append handler to the end of the stack."""

    def set_all(self, *handlers: Handler) -> None:
        """Replace the whole stack."""

    def handlers(self) -> tuple[Handler, ...]:
        """Return registration-ordered snapshot."""

    def run_all(self, dispatch: HandlerDispatch) -> int:
        """Dispatch every handler in order and return the count."""

    def __len__(self) -> int: ...


def create_handler_stack(lock: threading.RLock | None = None) -> HandlerStack:
    """Create default handler stack implementation."""
    from stepengine.runtime.handlers import RuntimeHandlerStack

    return RuntimeHandlerStack(lock=lock)
