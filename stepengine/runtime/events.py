"""Event emitter implementation with concurrent and sequential fan-out."""

from __future__ import annotations

import threading
from collections.abc import Hashable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from stepengine.api.events import Listener, RecoverCallback
from stepengine.api.handlers import validate_handler
from stepengine.runtime.logging import get_logger

_LOG = get_logger("events")


@dataclass(slots=True)
class _Registration:
    listener: Listener
    once: bool = False


def _matches(candidate: Listener, listener: Listener) -> bool:
    return candidate == listener or getattr(candidate, "__wrapped__", None) == listener


class RuntimeEventEmitter:
    """Simple in-process pub/sub keyed by hashable event names."""

    def __init__(self, *, max_listeners: int = 10) -> None:
        self._lock = threading.Lock()
        self._registrations: dict[Hashable, list[_Registration]] = {}
        self._max_listeners = max_listeners
        self._warned: set[Hashable] = set()
        self._recover: RecoverCallback | None = None

    @property
    def max_listeners(self) -> int:
        return self._max_listeners

    def set_max_listeners(self, max_listeners: int) -> None:
        """Set per-event warning threshold; 0 disables the warning."""
        if max_listeners < 0:
            raise ValueError("max_listeners must be >= 0")
        self._max_listeners = max_listeners

    def recover_with(self, callback: RecoverCallback | None) -> None:
        self._recover = callback

    def on(self, event: Hashable, listener: Listener) -> Listener:
        return self._add(event, listener, once=False)

    def once(self, event: Hashable, listener: Listener) -> Listener:
        return self._add(event, listener, once=True)

    def off(self, event: Hashable, listener: Listener) -> None:
        """Remove every registration of listener, including wrapped ones."""
        with self._lock:
            registrations = self._registrations.get(event)
            if not registrations:
                return
            kept = [reg for reg in registrations if not _matches(reg.listener, listener)]
            if kept:
                self._registrations[event] = kept
            else:
                self._registrations.pop(event, None)

    def remove_all(self, event: Hashable | None = None) -> None:
        """Drop listeners for one event, or for every event when omitted."""
        with self._lock:
            if event is None:
                self._registrations.clear()
                self._warned.clear()
            else:
                self._registrations.pop(event, None)
                self._warned.discard(event)

    def listener_count(self, event: Hashable) -> int:
        with self._lock:
            return len(self._registrations.get(event, ()))

    def events(self) -> tuple[Hashable, ...]:
        with self._lock:
            return tuple(self._registrations)

    def emit(self, event: Hashable, *args: object) -> int:
        """Run listeners on worker threads and wait for all of them."""
        registrations = self._take(event)
        if not registrations:
            return 0
        first_error: BaseException | None = None
        with ThreadPoolExecutor(
            max_workers=len(registrations),
            thread_name_prefix="stepengine-emit",
        ) as pool:
            futures = [pool.submit(reg.listener, *args) for reg in registrations]
            for future in futures:
                exc = future.exception()
                if exc is None:
                    continue
                if self._recover is not None:
                    self._recover(event, exc)
                elif first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        return len(registrations)

    def emit_sync(self, event: Hashable, *args: object) -> int:
        """Run listeners in registration order on the calling thread."""
        registrations = self._take(event)
        for reg in registrations:
            try:
                reg.listener(*args)
            except Exception as exc:
                if self._recover is None:
                    raise
                self._recover(event, exc)
        return len(registrations)

    def _add(self, event: Hashable, listener: Listener, *, once: bool) -> Listener:
        validated = validate_handler(listener)
        with self._lock:
            registrations = self._registrations.setdefault(event, [])
            registrations.append(_Registration(listener=validated, once=once))
            count = len(registrations)
            over_limit = 0 < self._max_listeners < count and event not in self._warned
            if over_limit:
                self._warned.add(event)
        if over_limit:
            _LOG.warning(
                "possible listener leak: event=%r listeners=%d max_listeners=%d",
                event,
                count,
                self._max_listeners,
            )
        return listener

    def _take(self, event: Hashable) -> list[_Registration]:
        with self._lock:
            registrations = self._registrations.get(event)
            if not registrations:
                return []
            snapshot = list(registrations)
            if any(reg.once for reg in snapshot):
                kept = [reg for reg in registrations if not reg.once]
                if kept:
                    self._registrations[event] = kept
                else:
                    self._registrations.pop(event, None)
            return snapshot


EventEmitter = RuntimeEventEmitter
