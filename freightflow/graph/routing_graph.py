"""Weighted routing view over a selectable subset of network edges.

`RoutingGraph` extends `networkx.MultiDiGraph` with strict node management and
monotonically increasing integer edge ids, so that adjacency iteration order
(and therefore shortest-path tie-breaking) depends only on insertion order.
`build_adjacency()` fills it from a `NetworkModel` for one routing mode.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Tuple

import networkx as nx

from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.logging import get_logger
from freightflow.model.network import Edge, EdgeKind, EdgeRole, NetworkModel

logger = get_logger(__name__)

NodeID = Hashable
EdgeID = int
AttrDict = Dict[str, Any]


class RoutingMode(str, Enum):
    """Edge universe used to build a routing graph."""

    #: Original edges whose role is main.
    MAIN_ONLY = "main_only"
    #: All original edges plus the current dynamic edges.
    WITH_ALTERNATIVES = "with_alt"


class RoutingGraph(nx.MultiDiGraph):
    """A multi-directed graph of routing segments.

    This class enforces:
      - No automatic creation of missing nodes when adding an edge.
      - No duplicate nodes (raises ValueError on duplicates).
      - Integer edge ids assigned in insertion order, never reused.

    Each edge carries ``cost`` (float), ``kind`` (EdgeKind), ``role``
    (EdgeRole) and ``edge_key`` (EdgeKey) attributes.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._next_edge_id: int = 0

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return a new unique integer edge id.

        Signature matches NetworkX's ``new_edge_key(self, u, v, key=None)``.
        """
        next_edge_id = self._next_edge_id
        self._next_edge_id += 1
        return int(next_edge_id)

    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed edge between existing nodes under a fresh id.

        Raises:
            ValueError: If either node does not exist.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")
        key = self.new_edge_key(u_for_edge, v_for_edge)
        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        return key

    def add_segment(self, edge: Edge, cost: float) -> Tuple[EdgeID, EdgeID]:
        """Add both traversal directions of an undirected network edge.

        Returns:
            The ids of the forward and reverse directed edges.
        """
        attrs = {
            "cost": cost,
            "kind": edge.kind,
            "role": edge.role,
            "edge_key": edge.key,
        }
        fwd = self.add_edge(edge.source, edge.target, **attrs)
        rev = self.add_edge(edge.target, edge.source, **attrs)
        return fwd, rev

    def segment_count(self) -> int:
        """Number of undirected segments (directed edges / 2)."""
        return self.number_of_edges() // 2


def edge_cost(edge: Edge, config: Optional[SimulationConfig] = None) -> float:
    """Routing cost of an edge: length times its role/provenance penalty.

    Dynamic and predefined-alternative edges cost more than their length so a
    plain least-cost search prefers main edges whenever they are usable.
    """
    cfg = config or DEFAULT_CONFIG
    penalty = 1.0
    if edge.kind is EdgeKind.DYNAMIC:
        penalty = cfg.dynamic_penalty
    elif edge.role is EdgeRole.ALT_PREDEFINED:
        penalty = cfg.predefined_alt_penalty
    return edge.routing_length * penalty


def eligible_edges(network: NetworkModel, mode: RoutingMode) -> List[Edge]:
    """Edges of the network that belong to ``mode``'s edge universe."""
    if mode is RoutingMode.MAIN_ONLY:
        return [e for e in network.original_edges if e.role is EdgeRole.MAIN]
    return network.all_edges()


def build_adjacency(
    network: NetworkModel,
    mode: RoutingMode,
    ignore_blocks: bool = False,
    config: Optional[SimulationConfig] = None,
) -> RoutingGraph:
    """Build a routing graph over the edges selected by ``mode``.

    Args:
        network: Source network model.
        mode: Edge universe to include.
        ignore_blocks: When False, blocked edges are left out.
        config: Penalty settings (defaults to ``DEFAULT_CONFIG``).

    Returns:
        A `RoutingGraph` containing every network node and both directions
        of each eligible edge.
    """
    graph = RoutingGraph()
    for node_id in network.nodes:
        graph.add_node(node_id)

    selected = eligible_edges(network, mode)
    skipped = 0
    for edge in selected:
        st = network.state(edge.key)
        if not ignore_blocks and st is not None and st.blocked:
            skipped += 1
            continue
        graph.add_segment(edge, edge_cost(edge, config))

    logger.debug(
        "Routing graph %s (ignore_blocks=%s): %d segments, %d blocked skipped",
        mode.value,
        ignore_blocks,
        graph.segment_count(),
        skipped,
    )
    return graph
