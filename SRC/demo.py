from rendezvous_hash import RendezvousNodes, default_nodes
from nodes import IdNode, KeyValueNode, WeightedNode, Capacity
from node_hasher import XXHashNodeHasher
from rebalance import RebalancePlanner
from collections import Counter
import logging

logging.basicConfig(level=logging.INFO)

# 1) Unweighted cache nodes
nodes = default_nodes()
for nid in ['foo', 'bar', 'baz', 'qux']:
    nodes.insert(IdNode(nid))
print('Candidates for 1:', [n.node_id for n in nodes.calc_candidates(1)])
print('Candidates for "key":', [n.node_id for n in nodes.calc_candidates('key')])

# Snapshot BEFORE removing a node
nodes_before = nodes.clone()
nodes.remove('baz')

keys = [f'user-{i}' for i in range(1000)]
planner = RebalancePlanner()
plan = planner.plan_moved(keys, nodes_before, nodes)
print('Moved stats after removing baz:', planner.stats(plan))

# 2) Weighted shards
shards = RendezvousNodes()
for nid, cap in [('foo', 70), ('bar', 20), ('baz', 9), ('qux', 1)]:
    shards.insert(WeightedNode(IdNode(nid), Capacity(cap)))
wins = Counter(shards.get_node(i).node_id for i in range(10000))
print('Weighted first-choice share:', {k: v / 10000 for k, v in wins.items()})

# 3) Key/value endpoints with the xxh3 engine
endpoints = RendezvousNodes(XXHashNodeHasher(seed=2025))
for key, addr in [('vs-1', '10.0.0.1:6379'), ('vs-2', '10.0.0.2:6379'), ('vs-3', '10.0.0.3:6379')]:
    endpoints.insert(KeyValueNode(key, addr))
print('Failover order for vec-42:', [n.value for n in endpoints.get_nodes_for_key('vec-42', 2)])
