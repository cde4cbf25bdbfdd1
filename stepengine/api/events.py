"""Public event emitter API contracts."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Protocol, TypeAlias

Listener: TypeAlias = Callable[..., object]
RecoverCallback: TypeAlias = Callable[[Hashable, BaseException], None]


class EventEmitter(Protocol):
    """In-process pub/sub keyed by arbitrary hashable event names."""

    def on(self, event: Hashable, listener: Listener) -> Listener:
        """Register listener for every emission of event."""

    def once(self, event: Hashable, listener: Listener) -> Listener:
        """Register listener for the next emission of event only."""

    def off(self, event: Hashable, listener: Listener) -> None:
        """Remove listener registrations for event."""

    def emit(self, event: Hashable, *args: object) -> int:
        """Run listeners concurrently, wait for all, return count."""

    def emit_sync(self, event: Hashable, *args: object) -> int:
        """Run listeners one after another, return count."""

    def listener_count(self, event: Hashable) -> int:
        """Return number of listeners registered for event."""

    def recover_with(self, callback: RecoverCallback | None) -> None:
        """Route listener errors to callback instead of raising."""


def create_event_emitter(*, max_listeners: int = 10) -> EventEmitter:
    """Create default event emitter implementation."""
    from stepengine.runtime.events import RuntimeEventEmitter

    return RuntimeEventEmitter(max_listeners=max_listeners)
