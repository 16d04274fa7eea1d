"""Transport network model: nodes, edges, edge keys and per-edge state.

``NetworkModel`` owns the loaded topology (nodes and original edges), the
per-cycle list of dynamic edges, and the mutable ``EdgeState`` table keyed by
``EdgeKey``. It is the only object that mutates topology; the flow engine
writes flow and flag values into its state records.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from freightflow.logging import get_logger

LOGGER = get_logger(__name__)


class LoadError(ValueError):
    """Raised when network data is malformed or inconsistent."""


class EdgeKind(str, Enum):
    """Provenance of an edge."""

    #: Loaded from the network definition; persists across cycles.
    ORIGINAL = "orig"
    #: Synthesized during a disrupted cycle; discarded otherwise.
    DYNAMIC = "dyn"

    @classmethod
    def from_string(cls, value: str) -> "EdgeKind":
        """Parse a kind from its value ("orig") or member name ("ORIGINAL")."""
        for member in cls:
            if value == member.value or value.upper() == member.name:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid edge kind '{value}'. Valid values are: {valid}")


class EdgeRole(str, Enum):
    """Routing role of an edge."""

    MAIN = "main"
    ALT_PREDEFINED = "alt_pre"
    DYNAMIC = "dyn"

    @classmethod
    def from_string(cls, value: str) -> "EdgeRole":
        """Parse a role from its value ("alt_pre") or member name ("ALT_PREDEFINED")."""
        for member in cls:
            if value == member.value or value.upper() == member.name:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Invalid edge role '{value}'. Valid values are: {valid}")


@dataclass(frozen=True, order=True)
class EdgeKey:
    """Canonical identifier of an undirected edge and its provenance.

    Endpoints are stored ordered (``low <= high``) so that both traversal
    directions of one edge map to the same key.

    Attributes:
        low (int): Smaller endpoint id.
        high (int): Larger endpoint id.
        kind (EdgeKind): Edge provenance.
    """

    low: int
    high: int
    kind: EdgeKind = EdgeKind.ORIGINAL

    @classmethod
    def of(cls, u: int, v: int, kind: EdgeKind = EdgeKind.ORIGINAL) -> "EdgeKey":
        """Build the canonical key for the endpoint pair ``(u, v)``."""
        a, b = int(u), int(v)
        if a > b:
            a, b = b, a
        return cls(a, b, EdgeKind(kind))

    @classmethod
    def parse(cls, text: str) -> "EdgeKey":
        """Parse ``"a-b"`` or ``"a-b-kind"`` into a key.

        Raises:
            ValueError: If the text does not have that shape.
        """
        parts = text.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError(f"Edge key '{text}' must look like 'a-b' or 'a-b-kind'")
        try:
            u, v = int(parts[0]), int(parts[1])
        except ValueError:
            raise ValueError(f"Edge key '{text}' has non-integer endpoints") from None
        kind = EdgeKind.from_string(parts[2]) if len(parts) == 3 else EdgeKind.ORIGINAL
        return cls.of(u, v, kind)

    @property
    def endpoints(self) -> Tuple[int, int]:
        return self.low, self.high

    def __str__(self) -> str:
        return f"{self.low}-{self.high}-{self.kind.value}"


@dataclass(frozen=True)
class Node:
    """A freight origin/destination location.

    Attributes:
        id (int): Unique node identifier.
        lat (float): Latitude in degrees.
        lon (float): Longitude in degrees.
        name (str): Display name.
        region (str): Region or country code.
        node_type (str): Free-form type tag (e.g. "port", "hub").
        population (float): Population, used to pick hub nodes.
        inbound (float): Inbound goods volume (sink weight).
        outbound (float): Outbound goods volume (source volume).
    """

    id: int
    lat: float
    lon: float
    name: str = ""
    region: str = ""
    node_type: str = ""
    population: float = 0.0
    inbound: float = 0.0
    outbound: float = 0.0

    @property
    def label(self) -> str:
        return self.name.strip() or str(self.id)


@dataclass(frozen=True)
class Edge:
    """An undirected edge between two nodes.

    Attributes:
        source (int): First endpoint id.
        target (int): Second endpoint id.
        length (float): Physical length in km.
        role (EdgeRole): Routing role.
        kind (EdgeKind): Provenance.
        edge_type (str): Free-form type tag ("rail", "alt_near", ...).
        freight_estimate (float): Nominal freight estimate from the source data.
    """

    source: int
    target: int
    length: float = 1.0
    role: EdgeRole = EdgeRole.MAIN
    kind: EdgeKind = EdgeKind.ORIGINAL
    edge_type: str = ""
    freight_estimate: float = 0.0

    @property
    def key(self) -> EdgeKey:
        return EdgeKey.of(self.source, self.target, self.kind)

    @property
    def routing_length(self) -> float:
        """Length used for routing cost; zero lengths count as 1 km."""
        return self.length or 1.0


@dataclass(slots=True)
class EdgeState:
    """Mutable per-edge state.

    ``blocked`` is user controlled and survives recalculation; ``flow`` and
    ``overloaded`` are recomputed every cycle.
    """

    blocked: bool = False
    flow: float = 0.0
    overloaded: bool = False


def _require_finite(value: float, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LoadError(f"{what} must be a number, got {value!r}")
    if not math.isfinite(float(value)):
        raise LoadError(f"{what} must be finite, got {value!r}")
    return float(value)


@dataclass
class NetworkModel:
    """Container for nodes, original and dynamic edges, and edge state.

    Attributes:
        nodes (Dict[int, Node]): Node id -> Node, in load order.
        original_edges (List[Edge]): Edges from the network definition.
        dynamic_edges (List[Edge]): Edges synthesized for the current cycle.
    """

    nodes: Dict[int, Node] = field(default_factory=dict)
    original_edges: List[Edge] = field(default_factory=list)
    dynamic_edges: List[Edge] = field(default_factory=list)
    _states: Dict[EdgeKey, EdgeState] = field(
        default_factory=dict, init=False, repr=False
    )
    _edge_by_key: Dict[EdgeKey, Edge] = field(
        default_factory=dict, init=False, repr=False
    )

    @classmethod
    def build(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "NetworkModel":
        """Validate node/edge definitions and build a model.

        Args:
            nodes: Node definitions.
            edges: Original edge definitions. Their ``kind`` must be original.

        Returns:
            A new model with one unblocked state per original edge key.

        Raises:
            LoadError: On non-integer or duplicate ids, non-finite coordinates
                or volumes, or edges referencing unknown nodes.
        """
        model = cls()
        for node in nodes:
            model._add_node(node)
        for edge in edges:
            model._add_original_edge(edge)
        LOGGER.debug(
            "Built network with %d nodes and %d original edges (%d edge keys)",
            len(model.nodes),
            len(model.original_edges),
            len(model._states),
        )
        return model

    def _add_node(self, node: Node) -> None:
        if isinstance(node.id, bool) or not isinstance(node.id, int):
            raise LoadError(f"Node id must be an integer, got {node.id!r}")
        if node.id in self.nodes:
            raise LoadError(f"Duplicate node id {node.id}")
        _require_finite(node.lat, f"Node {node.id} latitude")
        _require_finite(node.lon, f"Node {node.id} longitude")
        for attr in ("population", "inbound", "outbound"):
            if _require_finite(getattr(node, attr), f"Node {node.id} {attr}") < 0:
                raise LoadError(f"Node {node.id} {attr} must be non-negative")
        self.nodes[node.id] = node

    def _add_original_edge(self, edge: Edge) -> None:
        if edge.kind is not EdgeKind.ORIGINAL:
            raise LoadError(f"Edge {edge.source}-{edge.target} must be original")
        if edge.role is EdgeRole.DYNAMIC:
            raise LoadError(
                f"Edge {edge.source}-{edge.target} cannot have the dynamic role"
            )
        for endpoint in (edge.source, edge.target):
            if isinstance(endpoint, bool) or not isinstance(endpoint, int):
                raise LoadError(f"Edge endpoint must be an integer, got {endpoint!r}")
            if endpoint not in self.nodes:
                raise LoadError(
                    f"Edge {edge.source}-{edge.target} references unknown node "
                    f"{endpoint}"
                )
        name = f"Edge {edge.source}-{edge.target}"
        length = _require_finite(edge.length, f"{name} length")
        if length < 0:
            raise LoadError(f"{name} length must be non-negative")

        key = edge.key
        if key in self._edge_by_key:
            LOGGER.debug("Parallel original edge %s shares existing state", key)
        else:
            self._edge_by_key[key] = edge
            self._states[key] = EdgeState()
        self.original_edges.append(edge)

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    def edge(self, key: EdgeKey) -> Optional[Edge]:
        """Return the edge registered under ``key`` (first one for parallel edges)."""
        return self._edge_by_key.get(key)

    def original_keys(self) -> List[EdgeKey]:
        """Distinct original edge keys in load order."""
        return [k for k in self._edge_by_key if k.kind is EdgeKind.ORIGINAL]

    def state(self, key: EdgeKey) -> Optional[EdgeState]:
        return self._states.get(key)

    def ensure_state(self, key: EdgeKey) -> EdgeState:
        """Return the state for ``key``, creating a fresh one if missing."""
        st = self._states.get(key)
        if st is None:
            st = EdgeState()
            self._states[key] = st
        return st

    def states(self) -> Iterator[Tuple[EdgeKey, EdgeState]]:
        return iter(self._states.items())

    def all_edges(self) -> List[Edge]:
        """Original edges followed by the current dynamic edges."""
        return self.original_edges + self.dynamic_edges

    def set_dynamic_edges(self, edges: Iterable[Edge]) -> None:
        """Replace the dynamic edge list and its state entries.

        States of dynamic keys that are no longer present are discarded;
        new keys get a fresh unblocked, zero-flow state. Kept keys resolve
        to the edge from the new list.

        Raises:
            ValueError: If any edge is not dynamic. The model is left unchanged.
        """
        new_edges = list(edges)
        for e in new_edges:
            if e.kind is not EdgeKind.DYNAMIC:
                raise ValueError(f"Edge {e.key} is not a dynamic edge")

        new_by_key: Dict[EdgeKey, Edge] = {}
        for e in new_edges:
            new_by_key.setdefault(e.key, e)
        for e in self.dynamic_edges:
            if e.key not in new_by_key:
                self._states.pop(e.key, None)
                self._edge_by_key.pop(e.key, None)
        for key, e in new_by_key.items():
            self._edge_by_key[key] = e
            self.ensure_state(key)
        self.dynamic_edges = new_edges

    def clear_dynamic_edges(self) -> None:
        self.set_dynamic_edges([])

    def reset_flows(self) -> None:
        for st in self._states.values():
            st.flow = 0.0

    def clear_overloads(self) -> None:
        for st in self._states.values():
            st.overloaded = False

    def reset(self) -> None:
        """Clear blocked/flow/overloaded on every state and drop dynamic edges."""
        self.clear_dynamic_edges()
        for st in self._states.values():
            st.blocked = False
            st.flow = 0.0
            st.overloaded = False

    def add_flow(self, key: EdgeKey, amount: float) -> None:
        st = self._states.get(key)
        if st is not None:
            st.flow += amount
