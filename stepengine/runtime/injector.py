"""Value registry that invokes handlers with resolved parameters."""

from __future__ import annotations

import inspect
import threading
import typing
from collections.abc import Callable

from stepengine.api.errors import ResolutionError
from stepengine.api.handlers import Handler, describe_handler
from stepengine.api.invocation import Injector

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_MISSING = object()


def _token_name(token: object) -> str:
    return str(getattr(token, "__qualname__", None) or token)


def _annotation_target(handler: Handler) -> object:
    if inspect.isclass(handler):
        return handler.__init__
    if inspect.isroutine(handler):
        return handler
    return getattr(handler, "__call__", handler)


def _type_hints(handler: Handler) -> dict[str, object]:
    try:
        return typing.get_type_hints(_annotation_target(handler))
    except (NameError, TypeError, AttributeError):
        # Local or forward references stay strings and are matched by name.
        return {}


class RuntimeInjector(Injector):
    """Type-keyed value registry with lazy factories and parent fallback."""

    def __init__(self, *, parent: Injector | None = None) -> None:
        self._parent = parent
        self._lock = threading.RLock()
        self._instances: dict[object, object] = {}
        self._factories: dict[object, Callable[[Injector], object]] = {}

    @property
    def parent(self) -> Injector | None:
        return self._parent

    def map(self, value: object) -> None:
        self.map_to(value, type(value))

    def map_to(self, value: object, token: object) -> None:
        with self._lock:
            self._instances[token] = value

    def bind_factory(self, token: object, factory: Callable[[Injector], object]) -> None:
        with self._lock:
            self._factories[token] = factory
            self._instances.pop(token, None)

    def create_child(self) -> RuntimeInjector:
        return RuntimeInjector(parent=self)

    def has(self, token: object) -> bool:
        return self._lookup(token) is not _MISSING

    def resolve(self, token: object) -> object:
        value = self._lookup(token)
        if value is _MISSING:
            raise ResolutionError(f"missing injected value: {_token_name(token)}")
        return value

    def invoke(self, handler: Handler) -> object:
        """Call handler with every parameter resolved by its annotation.

        Parameters without a mapped value fall back to their default. Variadic
        parameters are left empty.
        """
        try:
            signature = inspect.signature(handler)
        except (TypeError, ValueError):
            return handler()
        hints = _type_hints(handler)
        args: list[object] = []
        kwargs: dict[str, object] = {}
        positional_gap = False
        for param in signature.parameters.values():
            if param.kind in _SKIPPED_KINDS:
                continue
            annotation = hints.get(param.name, param.annotation)
            value = _MISSING
            if annotation is not inspect.Parameter.empty:
                value = self._lookup(annotation)
            if value is _MISSING:
                if param.default is inspect.Parameter.empty:
                    raise ResolutionError(
                        f"cannot resolve parameter '{param.name}' "
                        f"({_token_name(annotation)}) of {describe_handler(handler)}",
                        handler=handler,
                    )
                positional_gap = positional_gap or param.kind is inspect.Parameter.POSITIONAL_ONLY
                continue
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                if positional_gap:
                    continue
                args.append(value)
            else:
                kwargs[param.name] = value
        return handler(*args, **kwargs)

    def _lookup(self, token: object) -> object:
        with self._lock:
            try:
                if token in self._instances:
                    return self._instances[token]
                factory = self._factories.get(token)
            except TypeError:
                return self._lookup_parent(token)
        if factory is not None:
            instance = factory(self)
            with self._lock:
                return self._instances.setdefault(token, instance)
        found = self._lookup_compatible(token)
        if found is not _MISSING:
            return found
        return self._lookup_parent(token)

    def _lookup_compatible(self, token: object) -> object:
        with self._lock:
            candidates = list(self._instances.items())
        if isinstance(token, str):
            name = token.rsplit(".", 1)[-1]
            for key, value in candidates:
                if getattr(key, "__name__", None) == name:
                    return value
            return _MISSING
        if not isinstance(token, type):
            return _MISSING
        for _, value in candidates:
            try:
                if isinstance(value, token):
                    return value
            except TypeError:
                # Non runtime-checkable protocols only match by identity.
                return _MISSING
        return _MISSING

    def _lookup_parent(self, token: object) -> object:
        parent = self._parent
        if parent is None:
            return _MISSING
        if isinstance(parent, RuntimeInjector):
            return parent._lookup(token)
        if parent.has(token):
            return parent.resolve(token)
        return _MISSING
