from __future__ import annotations

import pytest

from qsub.core.errors import SerializationError
from qsub.core.hashing import hash_key, json_dumps_key


def test_json_dumps_key_keeps_emission_order() -> None:
    obj1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}}
    obj2 = {"a": 1, "b": 2, "nested": {"x": 1, "y": 2}}
    assert json_dumps_key(obj1) != json_dumps_key(obj2)
    assert json_dumps_key(obj1) == '{"b":2,"a":1,"nested":{"y":2,"x":1}}'


def test_json_dumps_key_sorted_when_asked() -> None:
    obj1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}}
    obj2 = {"nested": {"x": 1, "y": 2}, "a": 1, "b": 2}
    assert json_dumps_key(obj1, sort_keys=True) == json_dumps_key(obj2, sort_keys=True)


def test_json_dumps_key_unicode_policy() -> None:
    assert "🐢" in json_dumps_key({"name": "🐢"})
    assert "\\ud83d" in json_dumps_key({"name": "🐢"}, ensure_ascii=True)


@pytest.mark.parametrize("bad", [float("nan"), object()])
def test_json_dumps_key_rejects_unencodable(bad) -> None:
    with pytest.raises(SerializationError):
        json_dumps_key({"v": bad})


def test_hash_key_stable() -> None:
    assert hash_key('{"query":1}') == hash_key('{"query":1}')
    assert hash_key('{"query":1}') != hash_key('{"query":2}')
    assert len(hash_key("")) == 64
