"""Read-only snapshot of a network after a recalculation cycle.

`build_snapshot()` copies the per-edge state of a `NetworkModel` into small
immutable records that rendering and reporting collaborators can consume
without touching the live model. `NetworkSnapshot.summary()` aggregates the
headline statistics (total volume, visible/blocked/overloaded edge counts and
the volume carried on alternative routes).

Objects expose `to_dict()` returning JSON-safe primitives, and
`NetworkSnapshot.to_dataframe()` returns one row per edge.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

import pandas as pd

from freightflow.model.network import Edge, EdgeKey, EdgeKind, EdgeRole, NetworkModel

#: Flow below this volume does not count as "alternative route in use".
ALT_USED_THRESHOLD = 1e-4


@dataclass(frozen=True)
class EdgeReport:
    """State of one edge as seen by rendering/reporting collaborators.

    Args:
        key: Canonical edge key string (e.g. ``"1-2-orig"``).
        source: First endpoint id.
        target: Second endpoint id.
        role: Routing role value (``main``, ``alt_pre``, ``dyn``).
        kind: Provenance value (``orig`` or ``dyn``).
        edge_type: Type tag from the network data or the dynamic rule.
        length: Length in km.
        flow: Final flow of the cycle.
        blocked: User block flag.
        overloaded: Whether flow exceeds capacity.
        capacity: Logical capacity; None for dynamic edges.
        rerouted: Whether a rerouted demand newly uses this original edge.
        visible: Whether the edge is shown under the alternative-mode gate.
        label: Display category (``main``, ``reroute``, ``alt_predefined``,
            ``dynamic``).
    """

    key: str
    source: int
    target: int
    role: str
    kind: str
    edge_type: str
    length: float
    flow: float
    blocked: bool
    overloaded: bool
    capacity: Optional[float]
    rerouted: bool
    visible: bool
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NetworkStats:
    """Headline statistics for one cycle.

    Attributes:
        total_flow: Sum of flow over original and dynamic edges.
        visible_edges: Number of edges shown under the alternative-mode gate.
        blocked_edges: Number of blocked original edges.
        overloaded_main_edges: Number of overloaded main edges.
        alternative_volume: Flow on reroute-marked, predefined-alternative
            (while in alternative mode) and visible dynamic edges.
        alternative_used: Whether ``alternative_volume`` is non-negligible.
        flow_scale: Flow multiplier in effect.
    """

    total_flow: float
    visible_edges: int
    blocked_edges: int
    overloaded_main_edges: int
    alternative_volume: float
    alternative_used: bool
    flow_scale: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NetworkSnapshot:
    """Immutable view of edge state, reroute marks and alternative mode."""

    edges: Tuple[EdgeReport, ...]
    reroute_keys: FrozenSet[EdgeKey]
    dynamic_edges: Tuple[Edge, ...]
    alternative_mode_active: bool
    flow_scale: float

    def edge(self, key: EdgeKey) -> Optional[EdgeReport]:
        text = str(key)
        for report in self.edges:
            if report.key == text:
                return report
        return None

    def flows(self) -> Dict[str, float]:
        """Edge key string -> flow."""
        return {r.key: r.flow for r in self.edges}

    def summary(self) -> NetworkStats:
        total_flow = 0.0
        visible = 0
        blocked = 0
        overloaded_main = 0
        alt_volume = 0.0

        for r in self.edges:
            total_flow += r.flow
            if r.kind == EdgeKind.ORIGINAL.value:
                if r.blocked:
                    blocked += 1
                if r.overloaded and r.role == EdgeRole.MAIN.value:
                    overloaded_main += 1
                if r.rerouted or (
                    self.alternative_mode_active
                    and r.role == EdgeRole.ALT_PREDEFINED.value
                ):
                    alt_volume += r.flow
            elif r.visible:
                alt_volume += r.flow
            if r.visible:
                visible += 1

        return NetworkStats(
            total_flow=total_flow,
            visible_edges=visible,
            blocked_edges=blocked,
            overloaded_main_edges=overloaded_main,
            alternative_volume=alt_volume,
            alternative_used=alt_volume > ALT_USED_THRESHOLD,
            flow_scale=self.flow_scale,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alternative_mode_active": self.alternative_mode_active,
            "flow_scale": self.flow_scale,
            "reroute_keys": sorted(str(k) for k in self.reroute_keys),
            "dynamic_edges": [
                {
                    "key": str(e.key),
                    "source": e.source,
                    "target": e.target,
                    "edge_type": e.edge_type,
                    "length": e.length,
                }
                for e in self.dynamic_edges
            ],
            "edges": [r.to_dict() for r in self.edges],
            "summary": self.summary().to_dict(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per edge, indexed by edge key string."""
        columns = list(EdgeReport.__dataclass_fields__)
        df = pd.DataFrame([r.to_dict() for r in self.edges], columns=columns)
        return df.set_index("key", drop=False)


def _label(edge: Edge, rerouted: bool) -> str:
    if edge.kind is EdgeKind.DYNAMIC:
        return "dynamic"
    if rerouted:
        return "reroute"
    if edge.role is EdgeRole.ALT_PREDEFINED:
        return "alt_predefined"
    return "main"


def _visible(edge: Edge, flow: float, alternative_mode: bool) -> bool:
    if edge.kind is EdgeKind.DYNAMIC:
        return alternative_mode and flow > 0
    if edge.role is EdgeRole.ALT_PREDEFINED:
        return alternative_mode
    return True


def build_snapshot(
    network: NetworkModel,
    *,
    capacities: Mapping[EdgeKey, float],
    reroute_keys: FrozenSet[EdgeKey],
    alternative_mode_active: bool,
    flow_scale: float,
) -> NetworkSnapshot:
    """Copy the current edge state of ``network`` into a snapshot.

    Parallel original edges sharing one key are reported once.
    """
    reports: List[EdgeReport] = []
    seen = set()
    for edge in network.all_edges():
        key = edge.key
        if key in seen:
            continue
        seen.add(key)
        st = network.state(key)
        if st is None:
            continue
        rerouted = key in reroute_keys
        reports.append(
            EdgeReport(
                key=str(key),
                source=edge.source,
                target=edge.target,
                role=edge.role.value,
                kind=edge.kind.value,
                edge_type=edge.edge_type,
                length=edge.length,
                flow=st.flow,
                blocked=st.blocked,
                overloaded=st.overloaded,
                capacity=(
                    capacities.get(key) if edge.kind is EdgeKind.ORIGINAL else None
                ),
                rerouted=rerouted,
                visible=_visible(edge, st.flow, alternative_mode_active),
                label=_label(edge, rerouted),
            )
        )
    return NetworkSnapshot(
        edges=tuple(reports),
        reroute_keys=frozenset(reroute_keys),
        dynamic_edges=tuple(network.dynamic_edges),
        alternative_mode_active=alternative_mode_active,
        flow_scale=flow_scale,
    )
