"""Rendezvous (highest random weight) node set.
- Id-keyed membership with replace-on-insert
- Full candidate ranking per item: score desc, ties by node id desc
- No per-item state; every ranking is recomputed from the current members
"""
from __future__ import annotations

from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
import logging
import threading

from node_hasher import DefaultNodeHasher, NodeHasher
from nodes import IdNode

log = logging.getLogger(__name__)

N = TypeVar("N")


def _candidate_key(scored: Tuple[Any, Any]) -> Tuple[Any, Any]:
    code, node = scored
    return (code, node.node_id)


class RendezvousNodes(Generic[N]):
    """Set of nodes ranked per item by rendezvous hashing."""
    def __init__(self, hasher: Optional[NodeHasher] = None):
        self._hasher = hasher if hasher is not None else DefaultNodeHasher()
        self._lock = threading.RLock()
        self._nodes: Dict[Any, N] = {}

    @property
    def hasher(self) -> NodeHasher:
        return self._hasher

    def insert(self, node: N) -> Optional[N]:
        """Add ``node``, replacing any node with the same id. Returns the replaced node."""
        with self._lock:
            old = self._nodes.pop(node.node_id, None)
            self._nodes[node.node_id] = node
        log.debug("inserted node=%s replaced=%s", node.node_id, old is not None)
        return old

    def remove(self, node_id: Any) -> Optional[N]:
        with self._lock:
            node = self._nodes.pop(node_id, None)
        if node is not None:
            log.debug("removed node=%s", node_id)
        return node

    def contains(self, node_id: Any) -> bool:
        with self._lock:
            return node_id in self._nodes

    def size(self) -> int:
        with self._lock:
            return len(self._nodes)

    def is_empty(self) -> bool:
        return self.size() == 0

    def nodes(self) -> List[N]:
        with self._lock:
            return list(self._nodes.values())

    def __contains__(self, node_id: Any) -> bool:
        return self.contains(node_id)

    def __len__(self) -> int:
        return self.size()

    def calc_candidates(self, item: Any) -> List[N]:
        """Return every node ordered by preference for ``item``.

        Sorted by hash code descending; equal codes fall back to node id
        descending so the order never depends on insertion order.
        """
        scored = [(n.hash_code(self._hasher, item), n) for n in self.nodes()]
        scored.sort(key=_candidate_key, reverse=True)
        return [n for (_, n) in scored]

    def get_node(self, item: Any) -> Optional[N]:
        candidates = self.calc_candidates(item)
        return candidates[0] if candidates else None

    def get_nodes_for_key(self, item: Any, n: int = 1) -> List[N]:
        return self.calc_candidates(item)[:max(0, n)]

    def clone(self) -> "RendezvousNodes[N]":
        """Copy the membership for before/after comparison; the hasher is shared."""
        other: RendezvousNodes[N] = RendezvousNodes(self._hasher)
        other._nodes = self.nodes_by_id()
        return other

    def nodes_by_id(self) -> Dict[Any, N]:
        with self._lock:
            return dict(self._nodes)


def default_nodes() -> RendezvousNodes[IdNode]:
    """Identity-node set using a fresh DefaultNodeHasher."""
    return RendezvousNodes(DefaultNodeHasher())
