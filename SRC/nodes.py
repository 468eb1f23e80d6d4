"""Node variants scored by rendezvous hashing.
- IdNode: the node value is its own id
- KeyValueNode: id plus an inert payload
- WeightedNode: any unweighted node plus a Capacity (logarithmic method)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar
import math

from node_hasher import MAX_UINT64, NodeHasher

ID = TypeVar("ID")
V = TypeVar("V")
N = TypeVar("N")


class InvalidCapacityError(ValueError):
    pass


def _as_capacity(value: Any) -> Optional[float]:
    try:
        value = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if value > 0 and math.isfinite(value):
        return value
    return None


@dataclass(frozen=True)
class Capacity:
    """Positive, finite relative weight of a node."""
    value: float

    def __post_init__(self):
        value = _as_capacity(self.value)
        if value is None:
            raise InvalidCapacityError(f"capacity must be positive and finite, got {self.value!r}")
        object.__setattr__(self, "value", value)


def new_capacity(value: float) -> Optional[Capacity]:
    """Build a Capacity, or return None if ``value`` is not positive and finite."""
    if _as_capacity(value) is None:
        return None
    return Capacity(value)


@dataclass(frozen=True)
class IdNode(Generic[ID]):
    node: ID

    @property
    def node_id(self) -> ID:
        return self.node

    def hash_code(self, hasher: NodeHasher, item: Any) -> int:
        return hasher.hash(self.node, item)


@dataclass(frozen=True)
class KeyValueNode(Generic[ID, V]):
    key: ID
    value: V

    @property
    def node_id(self) -> ID:
        return self.key

    def hash_code(self, hasher: NodeHasher, item: Any) -> int:
        # value is payload only
        return hasher.hash(self.key, item)


@dataclass(frozen=True)
class WeightedNode(Generic[N]):
    """Wraps an unweighted node with a capacity.

    The score is ``ln(h / MAX_UINT64) / capacity``: always <= 0, and a larger
    capacity pulls it toward zero, so the maximum score wins with probability
    proportional to capacity.
    """
    node: N
    capacity: Capacity

    @property
    def node_id(self):
        return self.node.node_id

    def hash_code(self, hasher: NodeHasher, item: Any) -> float:
        h = self.node.hash_code(hasher, item)
        if h == 0:
            return -math.inf
        return math.log(h / MAX_UINT64) / self.capacity.value
