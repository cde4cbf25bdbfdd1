"""Public invocation and dependency-injection contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from stepengine.api.handlers import Handler


@runtime_checkable
class Invoker(Protocol):
    """Capability that calls a handler with resolved arguments."""

    def invoke(self, handler: Handler) -> object:
        """Invoke handler and return its result."""


class ValueResolver(ABC):
    """Lookup side of the injector."""

    @abstractmethod
    def resolve(self, token: object) -> object:
        """Return the value mapped for token or raise ResolutionError."""

    @abstractmethod
    def has(self, token: object) -> bool:
        """Return whether token resolves without raising."""


class Injector(ValueResolver, ABC):
    """Value registry that can invoke handlers with resolved parameters."""

    @abstractmethod
    def map(self, value: object) -> None:
        """Map value under its own type."""

    @abstractmethod
    def map_to(self, value: object, token: object) -> None:
        """Map value under an explicit token."""

    @abstractmethod
    def bind_factory(self, token: object, factory: Callable[["Injector"], object]) -> None:
        """Bind a lazily-built singleton for token."""

    @abstractmethod
    def create_child(self) -> "Injector":
        """Return an injector that falls back to this one."""

    @abstractmethod
    def invoke(self, handler: Handler) -> object:
        """Invoke handler with parameters resolved from mapped values."""


def create_injector(parent: Injector | None = None) -> Injector:
    """Create default injector implementation."""
    from stepengine.runtime.injector import RuntimeInjector

    return RuntimeInjector(parent=parent)
