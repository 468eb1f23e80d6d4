from decimal import Decimal
import math

import pytest

from node_hasher import DefaultNodeHasher, MAX_UINT64
from nodes import Capacity, IdNode, InvalidCapacityError, KeyValueNode, WeightedNode, new_capacity


class FixedHasher:
    def __init__(self, code):
        self.code = code

    def hash(self, node_id, item):
        return self.code


@pytest.mark.parametrize("value", [
    0, 0.0, -1, -0.5, math.nan, math.inf, -math.inf,
    10 ** 400, -(10 ** 400), Decimal("NaN"), Decimal("sNaN"), "abc", None,
])
def test_invalid_capacity(value):
    assert new_capacity(value) is None
    with pytest.raises(InvalidCapacityError):
        Capacity(value)


@pytest.mark.parametrize("value", [0.001, 1, 70.0, 1e300, Decimal("2.5")])
def test_valid_capacity(value):
    cap = new_capacity(value)
    assert cap is not None
    assert cap.value == float(value)
    assert Capacity(value) == cap


def test_capacity_is_immutable():
    cap = Capacity(2.0)
    with pytest.raises(AttributeError):
        cap.value = 3.0


def test_id_node_scores_its_own_value():
    h = DefaultNodeHasher()
    node = IdNode("foo")
    assert node.node_id == "foo"
    assert node.hash_code(h, "key") == h.hash("foo", "key")


def test_key_value_node_ignores_payload():
    h = DefaultNodeHasher()
    a = KeyValueNode("foo", {"addr": "10.0.0.1"})
    b = KeyValueNode("foo", None)
    assert a.node_id == "foo"
    assert a.hash_code(h, 42) == b.hash_code(h, 42) == IdNode("foo").hash_code(h, 42)


def test_weighted_node_log_transform():
    h = DefaultNodeHasher()
    inner = IdNode("foo")
    node = WeightedNode(inner, Capacity(4.0))
    assert node.node_id == "foo"
    raw = inner.hash_code(h, "key")
    assert node.hash_code(h, "key") == pytest.approx(math.log(raw / MAX_UINT64) / 4.0)
    assert node.hash_code(h, "key") <= 0


def test_weighted_node_bounds():
    top = WeightedNode(IdNode("a"), Capacity(1.0))
    assert top.hash_code(FixedHasher(MAX_UINT64), "x") == 0.0
    assert top.hash_code(FixedHasher(0), "x") == -math.inf


def test_larger_capacity_scores_closer_to_zero():
    h = FixedHasher(MAX_UINT64 // 3)
    light = WeightedNode(KeyValueNode("a", 1), Capacity(1.0))
    heavy = WeightedNode(KeyValueNode("b", 2), Capacity(10.0))
    assert light.hash_code(h, "x") < heavy.hash_code(h, "x") < 0
