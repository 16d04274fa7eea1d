"""Synthesis of alternative ("dynamic") edges for disrupted cycles.

Two rules produce candidates:

* proximity links join every node pair within ``near_radius_km``;
* hub links join each of the ``hub_count`` most populous nodes to every node
  within ``hub_radius_km``.

Candidates that duplicate an original edge's endpoint pair are dropped, and
the rest are deduplicated by endpoint pair (first candidate wins).

Scaling limit: both rules compare all node pairs, so generation is O(n^2) in
the node count. This is acceptable for networks of tens to low hundreds of
nodes and only runs while the network is disrupted.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set

from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.geo_helpers import node_distance
from freightflow.logging import get_logger
from freightflow.model.network import Edge, EdgeKey, EdgeKind, EdgeRole, Node

logger = get_logger(__name__)

NEAR_EDGE_TYPE = "alt_near"
HUB_EDGE_TYPE = "alt_hub"


def select_hubs(nodes: Sequence[Node], hub_count: int) -> Set[int]:
    """Ids of the ``hub_count`` most populous nodes (load order breaks ties)."""
    ranked = sorted(nodes, key=lambda n: -n.population)
    return {n.id for n in ranked[:hub_count]}


def _dynamic_edge(a: Node, b: Node, km: float, edge_type: str, estimate: float) -> Edge:
    return Edge(
        source=a.id,
        target=b.id,
        length=km,
        role=EdgeRole.DYNAMIC,
        kind=EdgeKind.DYNAMIC,
        edge_type=edge_type,
        freight_estimate=estimate,
    )


def build_dynamic_edges(
    nodes: Sequence[Node],
    original_edges: Iterable[Edge],
    config: Optional[SimulationConfig] = None,
) -> List[Edge]:
    """Generate deduplicated proximity and hub alternative edges.

    Args:
        nodes: Network nodes in load order.
        original_edges: Original edges; their endpoint pairs are excluded.
        config: Radii, hub count and freight estimates.

    Returns:
        Dynamic edges in generation order (proximity links first).
    """
    cfg = config or DEFAULT_CONFIG
    candidates: List[Edge] = []

    for i, a in enumerate(nodes):
        for b in nodes[i + 1 :]:
            km = node_distance(a, b)
            if km <= cfg.near_radius_km:
                candidates.append(
                    _dynamic_edge(a, b, km, NEAR_EDGE_TYPE, cfg.near_freight_estimate)
                )

    hubs = select_hubs(nodes, cfg.hub_count)
    for hub in (n for n in nodes if n.id in hubs):
        for other in nodes:
            if other.id == hub.id:
                continue
            km = node_distance(hub, other)
            if km <= cfg.hub_radius_km:
                candidates.append(
                    _dynamic_edge(
                        hub, other, km, HUB_EDGE_TYPE, cfg.hub_freight_estimate
                    )
                )

    original_pairs = {EdgeKey.of(e.source, e.target).endpoints for e in original_edges}
    unique: Dict[EdgeKey, Edge] = {}
    for edge in candidates:
        if edge.key.endpoints in original_pairs:
            continue
        unique.setdefault(edge.key, edge)

    logger.debug(
        "Generated %d dynamic edges from %d candidates (%d hubs)",
        len(unique),
        len(candidates),
        len(hubs),
    )
    return list(unique.values())
