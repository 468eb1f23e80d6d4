"""Rebalancing utilities.

Plan owner changes for items between two node sets (e.g. before/after a
member joins or leaves). Moving the data itself is up to the caller.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Tuple
from collections import Counter
import logging

from rendezvous_hash import RendezvousNodes

log = logging.getLogger(__name__)

Plan = Dict[Any, Tuple[Optional[Any], Optional[Any]]]


def _owner_id(nodes: RendezvousNodes, item: Any) -> Optional[Any]:
    node = nodes.get_node(item)
    return node.node_id if node is not None else None


class RebalancePlanner:
    def plan_moved(self, items: Iterable[Any], before: RendezvousNodes, after: RendezvousNodes) -> Plan:
        """Return dict item -> (from_owner, to_owner) for items whose top node changed."""
        moved: Plan = {}
        for item in items:
            b = _owner_id(before, item)
            a = _owner_id(after, item)
            if b != a:
                moved[item] = (b, a)
        log.debug("planned moves=%d", len(moved))
        return moved

    def stats(self, plan: Plan) -> Dict[str, Any]:
        by_to = Counter([to for (_, to) in plan.values() if to is not None])
        by_from = Counter([frm for (frm, _) in plan.values() if frm is not None])
        return {
            "moved_count": len(plan),
            "by_to": dict(by_to),
            "by_from": dict(by_from),
        }
