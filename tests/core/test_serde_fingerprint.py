from __future__ import annotations

from schemaview.core.serde import fingerprint, json_dumps_canonical, json_loads


def test_canonical_json_sorts_keys_compactly() -> None:
    assert json_dumps_canonical({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


def test_canonical_json_keeps_unicode() -> None:
    assert json_dumps_canonical({"name": "Café"}) == '{"name":"Café"}'
    assert json_loads('{"name":"Café"}') == {"name": "Café"}


def test_fingerprint_ignores_key_order() -> None:
    assert fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
    assert fingerprint({"a": 1}) != fingerprint({"a": 2})
    assert len(fingerprint({})) == 64
