from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol, runtime_checkable

import pytest

from stepengine.api.errors import ResolutionError
from stepengine.api.invocation import Injector, create_injector
from stepengine.runtime.injector import RuntimeInjector


class Greeter:
    def __init__(self, name: str = "world") -> None:
        self.name = name


class LoudGreeter(Greeter):
    pass


@runtime_checkable
class Named(Protocol):
    name: str


def test_invoke_calls_zero_argument_handler() -> None:
    injector = RuntimeInjector()
    assert injector.invoke(lambda: 7) == 7


def test_invoke_resolves_parameters_by_annotation() -> None:
    injector = RuntimeInjector()
    greeter = Greeter("anagent")
    logger = logging.getLogger("test.injector")
    injector.map(greeter)
    injector.map_to(logger, logging.Logger)

    def handler(g: Greeter, log: logging.Logger) -> str:
        assert log is logger
        return g.name

    assert injector.invoke(handler) == "anagent"


def test_invoke_falls_back_to_default_for_unmapped_parameter() -> None:
    injector = RuntimeInjector()

    def handler(amount: Decimal = Decimal("1.5")) -> Decimal:
        return amount

    assert injector.invoke(handler) == Decimal("1.5")


def test_invoke_raises_resolution_error_for_unmapped_parameter() -> None:
    injector = RuntimeInjector()

    def handler(amount: Decimal) -> None:
        return None

    with pytest.raises(ResolutionError, match="amount"):
        injector.invoke(handler)


def test_invoke_rejects_unannotated_parameter_without_default() -> None:
    injector = RuntimeInjector()
    with pytest.raises(ResolutionError):
        injector.invoke(lambda value: value)


def test_invoke_leaves_variadic_parameters_empty() -> None:
    injector = RuntimeInjector()

    def handler(*args: object, **kwargs: object) -> tuple[tuple[object, ...], dict[str, object]]:
        return args, kwargs

    assert injector.invoke(handler) == ((), {})


def test_invoke_propagates_handler_exceptions_unwrapped() -> None:
    injector = RuntimeInjector()

    def handler() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        injector.invoke(handler)


def test_resolve_matches_subclass_and_runtime_checkable_protocol() -> None:
    injector = RuntimeInjector()
    loud = LoudGreeter("loud")
    injector.map(loud)

    assert injector.resolve(Greeter) is loud
    assert injector.resolve(Named) is loud


def test_bind_factory_builds_lazy_singleton() -> None:
    injector = RuntimeInjector()
    built: list[Greeter] = []

    def factory(resolver: Injector) -> Greeter:
        greeter = Greeter("lazy")
        built.append(greeter)
        return greeter

    injector.bind_factory(Greeter, factory)
    assert built == []
    first = injector.resolve(Greeter)
    second = injector.resolve(Greeter)
    assert first is second
    assert len(built) == 1


def test_child_injector_falls_back_to_parent_and_can_shadow() -> None:
    parent = RuntimeInjector()
    parent.map(Greeter("parent"))
    parent.map(3)
    child = parent.create_child()
    child.map(Greeter("child"))

    def handler(g: Greeter, n: int) -> str:
        return f"{g.name}:{n}"

    assert child.invoke(handler) == "child:3"
    assert parent.invoke(handler) == "parent:3"
    assert child.has(int)
    assert not parent.has(Decimal)


def test_invoke_with_unevaluable_annotation_matches_by_class_name() -> None:
    class LocalService:
        pass

    injector = RuntimeInjector()
    service = LocalService()
    injector.map(service)

    def handler(svc: LocalService) -> LocalService:
        return svc

    assert injector.invoke(handler) is service


def test_invoke_resolves_callable_instance_and_class_handlers() -> None:
    injector = RuntimeInjector()
    injector.map(Greeter("callable"))

    class Handler:
        def __call__(self, g: Greeter) -> str:
            return g.name

    class Built:
        def __init__(self, g: Greeter) -> None:
            self.name = g.name

    assert injector.invoke(Handler()) == "callable"
    assert injector.invoke(Built).name == "callable"


def test_create_injector_wires_parent() -> None:
    parent = create_injector()
    parent.map(Greeter("root"))
    child = create_injector(parent)
    assert child.resolve(Greeter).name == "root"
