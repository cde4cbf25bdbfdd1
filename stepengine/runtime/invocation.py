"""Invocation seam between the scheduler and its injector."""

from __future__ import annotations

from stepengine.api.errors import InvocationError
from stepengine.api.handlers import Handler, describe_handler
from stepengine.api.invocation import Invoker


class InvocationGateway:
    """Invoke handlers through an injector and normalize their failures."""

    def __init__(self, invoker: Invoker) -> None:
        self._invoker = invoker

    @property
    def invoker(self) -> Invoker:
        return self._invoker

    def invoke(self, handler: Handler) -> object:
        """Return handler result or raise InvocationError chained to the cause."""
        try:
            return self._invoker.invoke(handler)
        except InvocationError:
            raise
        except Exception as exc:
            raise InvocationError(
                f"handler {describe_handler(handler)} failed: {exc!r}",
                handler=handler,
            ) from exc
