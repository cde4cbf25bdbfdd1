"""Handler stack implementation for per-tick middleware."""

from __future__ import annotations

import threading

from stepengine.api.handlers import Handler, HandlerDispatch, validate_handler


class RuntimeHandlerStack:
    """Append-only ordered handler list guarded by the scheduler lock."""

    def __init__(self, *, lock: threading.RLock | None = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._handlers: list[Handler] = []

    def use(self, handler: Handler) -> None:
        """Validate and append one handler."""
        validated = validate_handler(handler)
        with self._lock:
            self._handlers.append(validated)

    def set_all(self, *handlers: Handler) -> None:
        """Replace the stack; nothing changes if any handler is invalid."""
        validated = [validate_handler(handler) for handler in handlers]
        with self._lock:
            self._handlers = validated

    def handlers(self) -> tuple[Handler, ...]:
        with self._lock:
            return tuple(self._handlers)

    def run_all(self, dispatch: HandlerDispatch) -> int:
        """Dispatch a registration-ordered snapshot outside the lock."""
        dispatched = 0
        for handler in self.handlers():
            dispatch(handler)
            dispatched += 1
        return dispatched

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)


HandlerStack = RuntimeHandlerStack
