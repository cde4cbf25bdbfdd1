from __future__ import annotations

from stepengine.runtime.json_codec import dumps_bytes, dumps_text


class _Opaque:
    def __repr__(self) -> str:
        return "<opaque>"


def test_dumps_text_falls_back_to_repr_for_unknown_objects() -> None:
    assert dumps_text({"value": _Opaque()}) == '{"value":"<opaque>"}'


def test_dumps_bytes_supports_sorted_pretty_output() -> None:
    raw = dumps_bytes({"b": 1, "a": 2}, pretty=True, sort_keys=True)
    assert raw.startswith(b"{\n")
    assert raw.index(b'"a"') < raw.index(b'"b"')
