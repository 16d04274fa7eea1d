"""Shortest-path-first (SPF) search over a `RoutingGraph`.

Implements single-source, single-destination Dijkstra with a binary heap
keyed by ``(cost, discovery sequence)``. Relaxation is strict, so among
equal-cost routes the first one discovered wins, and identical inputs always
yield identical paths.

Notes:
    Between two neighbors joined by parallel edges, only the cheapest edge is
    considered (the first one in insertion order on ties). The search stops
    as soon as the destination is popped at its minimal cost.
"""

from __future__ import annotations

from heapq import heappop, heappush
from typing import Dict, List, NamedTuple, Optional, Tuple

from freightflow.graph.routing_graph import NodeID, RoutingGraph
from freightflow.model.network import EdgeKey, EdgeKind

Cost = float


class PathSegment(NamedTuple):
    """One traversal step of a path."""

    source: int
    target: int
    kind: EdgeKind

    @property
    def key(self) -> EdgeKey:
        return EdgeKey.of(self.source, self.target, self.kind)


Path = Tuple[PathSegment, ...]


def shortest_path(
    graph: RoutingGraph, start: NodeID, goal: NodeID
) -> Optional[Path]:
    """Return the least-cost path from ``start`` to ``goal``.

    Args:
        graph: Routing graph with a ``cost`` attribute on every edge.
        start: Source node id.
        goal: Destination node id.

    Returns:
        Ordered segments from ``start`` to ``goal``; an empty tuple when
        ``start == goal``; ``None`` when either node is absent or ``goal`` is
        unreachable. Unreachability is an ordinary outcome, not an error.
    """
    outgoing_adjacencies = graph._adj  # type: ignore[attr-defined]
    if start not in outgoing_adjacencies or goal not in outgoing_adjacencies:
        return None

    costs: Dict[NodeID, Cost] = {start: 0.0}
    pred: Dict[NodeID, Tuple[NodeID, EdgeKind]] = {}
    seq = 0
    min_pq: List[Tuple[Cost, int, NodeID]] = [(0.0, seq, start)]

    while min_pq:
        current_cost, _, node_id = heappop(min_pq)
        if node_id == goal:
            break
        if current_cost > costs[node_id]:
            continue

        for neighbor_id, edges_map in outgoing_adjacencies[node_id].items():
            min_edge_cost: Optional[Cost] = None
            selected_kind: Optional[EdgeKind] = None
            for e_attr in edges_map.values():
                edge_cost = e_attr["cost"]
                if min_edge_cost is None or edge_cost < min_edge_cost:
                    min_edge_cost = edge_cost
                    selected_kind = e_attr["kind"]

            if min_edge_cost is None or selected_kind is None:
                continue

            new_cost = current_cost + min_edge_cost
            if neighbor_id not in costs or new_cost < costs[neighbor_id]:
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = (node_id, selected_kind)
                seq += 1
                heappush(min_pq, (new_cost, seq, neighbor_id))

    if goal not in costs:
        return None

    segments: List[PathSegment] = []
    cur = goal
    while cur != start:
        prev, kind = pred[cur]
        segments.append(PathSegment(prev, cur, kind))
        cur = prev
    segments.reverse()
    return tuple(segments)


def path_signature(path: Optional[Path]) -> Tuple[EdgeKey, ...]:
    """Ordered edge keys of a path (empty for ``None``)."""
    if not path:
        return ()
    return tuple(seg.key for seg in path)
