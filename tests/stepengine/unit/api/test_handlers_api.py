from __future__ import annotations

import functools

import pytest

from stepengine.api.errors import InvalidHandlerError
from stepengine.api.handlers import create_handler_stack, describe_handler, validate_handler
from stepengine.runtime.handlers import RuntimeHandlerStack


class _Callable:
    def __call__(self) -> None:
        return None


def _named() -> None:
    return None


def test_validate_handler_accepts_callables() -> None:
    for handler in (_named, lambda: None, _Callable(), functools.partial(_named), print):
        assert validate_handler(handler) is handler


@pytest.mark.parametrize("value", ["test", 42, None, object()])
def test_validate_handler_rejects_non_callables(value: object) -> None:
    with pytest.raises(InvalidHandlerError):
        validate_handler(value)


def test_describe_handler_prefers_qualified_name() -> None:
    assert describe_handler(_named) == "_named"
    assert describe_handler(_Callable()) == "_Callable"


def test_create_handler_stack_returns_runtime_stack() -> None:
    assert isinstance(create_handler_stack(), RuntimeHandlerStack)
