from enum import Enum

from store import keys


class Color(str, Enum):
    red = "red"


def test_canonical_is_order_independent():
    a = keys.canonical({"database": "PROD", "limit": 10, "offset": 0})
    b = keys.canonical({"offset": 0, "limit": 10, "database": "PROD"})
    assert a == b == "database=PROD&limit=10&offset=0"


def test_canonical_skips_none_and_renders_enums_and_bools():
    assert keys.canonical({"a": None, "b": Color.red, "c": True, "d": False}) == "b=red&c=true&d=false"
    assert keys.canonical({}) == ""


def test_query_includes_kind():
    assert keys.query("blocking", {"database": "X"}) == "database=X&kind=blocking"
    assert keys.query("blocking", {}) != keys.query("parallel", {})
