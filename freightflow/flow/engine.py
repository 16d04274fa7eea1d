"""Two-pass flow assignment with disruption detection and rerouting.

One recalculation cycle runs four phases in a fixed order:

1. Demand derivation from node volumes and the current flow scale.
2. Baseline pass: main edges only, blocks ignored. Produces the reference
   load used for capacity sizing and for deciding which demands may reroute.
3. Current-state pass: main edges only, blocks honored. Marks overloads and
   derives the disrupted edge set (blocked, or overloaded main edges).
4. Reroute pass: when disrupted, dynamic edges are generated and only the
   demands whose baseline path touched a disrupted edge are routed again over
   the extended graph; every other demand keeps its current-state path.

The final flows, overloaded flags, reroute marks and alternative-mode flag are
written to the `NetworkModel` edge state and exposed through `snapshot()`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from freightflow.algorithms.dynamic_edges import build_dynamic_edges
from freightflow.algorithms.spf import Path, path_signature, shortest_path
from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.graph.routing_graph import RoutingGraph, RoutingMode, build_adjacency
from freightflow.logging import get_logger
from freightflow.model.capacity import CapacityModel
from freightflow.model.demand import DemandGenerator, DemandUnit
from freightflow.model.network import (
    Edge,
    EdgeKey,
    EdgeKind,
    EdgeRole,
    EdgeState,
    NetworkModel,
    Node,
)
from freightflow.results.snapshot import NetworkSnapshot, build_snapshot

logger = get_logger(__name__)

OD = Tuple[int, int]


@dataclass(frozen=True)
class PassResult:
    """Paths and accumulated flow of one routing pass.

    Attributes:
        paths: Demand OD pair -> chosen path, or None when unreachable.
        flow: Edge key -> flow accumulated by this pass.
    """

    paths: Mapping[OD, Optional[Path]]
    flow: Mapping[EdgeKey, float]

    def path(self, od: OD) -> Optional[Path]:
        return self.paths.get(od)


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one recalculation cycle."""

    demands: Tuple[DemandUnit, ...]
    baseline: PassResult
    current: PassResult
    final: PassResult
    disrupted: FrozenSet[EdgeKey]
    affected_demands: FrozenSet[OD]
    reroute_keys: FrozenSet[EdgeKey]
    alternative_mode_active: bool
    unreachable: FrozenSet[OD] = field(default_factory=frozenset)


def _route_demands(
    graph: RoutingGraph,
    demands: Iterable[DemandUnit],
    original_only: bool = False,
) -> PassResult:
    """Route every demand on ``graph`` and accumulate flow per edge key."""
    paths: Dict[OD, Optional[Path]] = {}
    flow: Dict[EdgeKey, float] = {}
    for d in demands:
        path = shortest_path(graph, d.source, d.sink)
        paths[d.od] = path
        if not path:
            continue
        for seg in path:
            if original_only and seg.kind is not EdgeKind.ORIGINAL:
                continue
            flow[seg.key] = flow.get(seg.key, 0.0) + d.amount
    return PassResult(MappingProxyType(paths), MappingProxyType(flow))


class FlowAssignmentEngine:
    """Recomputes freight flow over a `NetworkModel` on demand.

    Commands (`toggle_block`, `set_flow_scale`, `reset`, `reload`) each run one
    `recalculate()` when they change something. All public operations are
    serialized with an internal lock, so a cycle always runs to completion
    before another command or cycle starts.

    Attributes:
        network (NetworkModel): The simulated network (replaced on reload).
        config (SimulationConfig): Tuning constants.
    """

    def __init__(
        self,
        network: NetworkModel,
        config: Optional[SimulationConfig] = None,
        flow_scale: float = 1.0,
    ) -> None:
        self.network = network
        self.config = config or DEFAULT_CONFIG
        self.capacity_model = CapacityModel(self.config)
        self._flow_scale = self.config.clamp_flow_scale(flow_scale)
        self._lock = threading.Lock()
        self._baseline_flow: Dict[EdgeKey, float] = {}
        self._reroute_keys: Set[EdgeKey] = set()
        self._alternative_mode = False
        self._last_result: Optional[CycleResult] = None

    @property
    def flow_scale(self) -> float:
        return self._flow_scale

    @property
    def alternative_mode_active(self) -> bool:
        return self._alternative_mode

    @property
    def reroute_keys(self) -> FrozenSet[EdgeKey]:
        return frozenset(self._reroute_keys)

    @property
    def baseline_flow(self) -> Mapping[EdgeKey, float]:
        return MappingProxyType(self._baseline_flow)

    @property
    def last_result(self) -> Optional[CycleResult]:
        return self._last_result

    def capacity_of(self, key: EdgeKey) -> float:
        """Capacity of ``key`` sized from the latest cycle's baseline."""
        return self.capacity_model.capacity_of(key, self._baseline_flow)

    #
    # Commands
    #
    def recalculate(self) -> CycleResult:
        """Run one full recalculation cycle and return its result."""
        with self._lock:
            return self._recalculate()

    def _blockable(self, key: EdgeKey) -> Optional[EdgeState]:
        """State of ``key`` if it is an original main edge, else None."""
        edge = self.network.edge(key)
        if (
            edge is None
            or key.kind is not EdgeKind.ORIGINAL
            or edge.role is not EdgeRole.MAIN
        ):
            return None
        return self.network.state(key)

    def toggle_block(self, key: EdgeKey) -> bool:
        """Flip the blocked flag of an original main edge and recalculate.

        Requests for dynamic, predefined-alternative or unknown edges are
        ignored.

        Returns:
            True if the flag was flipped, False if the command was ignored.
        """
        with self._lock:
            st = self._blockable(key)
            if st is None:
                logger.debug("Ignoring block toggle for non-blockable edge %s", key)
                return False
            st.blocked = not st.blocked
            logger.info("Edge %s %s", key, "blocked" if st.blocked else "unblocked")
            self._recalculate()
            return True

    def set_blocked(
        self, keys: Iterable[EdgeKey], blocked: bool = True
    ) -> List[EdgeKey]:
        """Set the blocked flag on several edges, then recalculate once.

        Non-blockable keys are skipped.

        Returns:
            The keys whose flag was applied.
        """
        with self._lock:
            applied: List[EdgeKey] = []
            for key in keys:
                st = self._blockable(key)
                if st is None:
                    logger.debug("Ignoring block request for non-blockable %s", key)
                    continue
                st.blocked = blocked
                applied.append(key)
            self._recalculate()
            return applied

    def set_flow_scale(self, value: float) -> float:
        """Set the flow multiplier (clamped to the configured range) and recalculate.

        Returns:
            The clamped value now in effect.
        """
        with self._lock:
            clamped = self.config.clamp_flow_scale(value)
            if clamped != value:
                logger.debug("Flow scale %.3f clamped to %.3f", value, clamped)
            self._flow_scale = clamped
            self._recalculate()
            return clamped

    def reset(self) -> CycleResult:
        """Clear blocks, flows, overloads and dynamic edges, then recalculate."""
        with self._lock:
            self.network.reset()
            self._reroute_keys = set()
            self._alternative_mode = False
            return self._recalculate()

    def reload(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> CycleResult:
        """Replace the network with a freshly validated one and recalculate.

        Raises:
            LoadError: If the definitions are invalid. The previous network
                stays in place.
        """
        with self._lock:
            network = NetworkModel.build(nodes, edges)
            self.network = network
            self._baseline_flow = {}
            self._reroute_keys = set()
            self._alternative_mode = False
            return self._recalculate()

    #
    # Outputs
    #
    def snapshot(self) -> NetworkSnapshot:
        """Read-only view of the latest cycle for rendering/reporting."""
        with self._lock:
            capacities = self.capacity_model.capacity_table(
                self._baseline_flow, self.network.original_keys()
            )
            return build_snapshot(
                self.network,
                capacities=capacities,
                reroute_keys=frozenset(self._reroute_keys),
                alternative_mode_active=self._alternative_mode,
                flow_scale=self._flow_scale,
            )

    #
    # Cycle phases
    #
    def _mark_overloads(self, baseline: Mapping[EdgeKey, float]) -> None:
        capacities = self.capacity_model.capacity_table(
            baseline, self.network.original_keys()
        )
        for key, st in self.network.states():
            if key.kind is not EdgeKind.ORIGINAL:
                st.overloaded = False
                continue
            st.overloaded = self.capacity_model.is_overloaded(st.flow, capacities[key])

    def _disrupted_keys(self) -> FrozenSet[EdgeKey]:
        disrupted: Set[EdgeKey] = set()
        for edge in self.network.original_edges:
            st = self.network.state(edge.key)
            if st is None:
                continue
            if st.blocked or (st.overloaded and edge.role is EdgeRole.MAIN):
                disrupted.add(edge.key)
        return frozenset(disrupted)

    def _apply_flow(self, flow: Mapping[EdgeKey, float]) -> None:
        for key, amount in flow.items():
            self.network.add_flow(key, amount)

    def _recalculate(self) -> CycleResult:
        network = self.network
        was_active = self._alternative_mode

        # Phase 1: demands
        demands = tuple(
            DemandGenerator(network, self.config).build_demands(self._flow_scale)
        )

        # Phase 2: baseline (reference only)
        baseline_graph = build_adjacency(
            network, RoutingMode.MAIN_ONLY, ignore_blocks=True, config=self.config
        )
        baseline = _route_demands(baseline_graph, demands, original_only=True)
        self._baseline_flow = dict(baseline.flow)

        # Phase 3: current state over available main edges
        network.reset_flows()
        network.clear_overloads()
        network.clear_dynamic_edges()
        main_graph = build_adjacency(
            network, RoutingMode.MAIN_ONLY, ignore_blocks=False, config=self.config
        )
        current = _route_demands(main_graph, demands)
        self._apply_flow(current.flow)
        self._mark_overloads(baseline.flow)

        disrupted = self._disrupted_keys()
        active = bool(disrupted)

        # Phase 4: reroute affected demands
        if active:
            network.set_dynamic_edges(
                build_dynamic_edges(
                    list(network.nodes.values()), network.original_edges, self.config
                )
            )
            reroute_graph = build_adjacency(
                network,
                RoutingMode.WITH_ALTERNATIVES,
                ignore_blocks=False,
                config=self.config,
            )
        else:
            network.clear_dynamic_edges()
            reroute_graph = main_graph

        network.reset_flows()
        network.clear_overloads()

        final_paths: Dict[OD, Optional[Path]] = {}
        final_flow: Dict[EdgeKey, float] = {}
        affected_demands: Set[OD] = set()
        reroute_keys: Set[EdgeKey] = set()
        unreachable: Set[OD] = set()

        for d in demands:
            base_path = baseline.path(d.od)
            affected = base_path is None or any(
                seg.kind is EdgeKind.ORIGINAL and seg.key in disrupted
                for seg in base_path
            )
            if affected:
                final_path = shortest_path(reroute_graph, d.source, d.sink)
                affected_demands.add(d.od)
            else:
                final_path = current.path(d.od)
            final_paths[d.od] = final_path

            if final_path is None:
                unreachable.add(d.od)
                continue
            for seg in final_path:
                final_flow[seg.key] = final_flow.get(seg.key, 0.0) + d.amount

            if active and affected and base_path is not None:
                if path_signature(final_path) != path_signature(base_path):
                    base_keys = {
                        seg.key for seg in base_path if seg.kind is EdgeKind.ORIGINAL
                    }
                    for seg in final_path:
                        if seg.kind is EdgeKind.ORIGINAL and seg.key not in base_keys:
                            reroute_keys.add(seg.key)

        self._apply_flow(final_flow)
        self._mark_overloads(baseline.flow)
        final_disrupted = self._disrupted_keys()
        self._alternative_mode = bool(final_disrupted)
        self._reroute_keys = reroute_keys

        if self._alternative_mode != was_active:
            logger.info(
                "Alternative mode %s (%d disrupted edges)",
                "activated" if self._alternative_mode else "deactivated",
                len(final_disrupted),
            )
        logger.debug(
            "Cycle done: %d demands, %d affected, %d unreachable, %d dynamic edges, "
            "%d reroute-marked edges",
            len(demands),
            len(affected_demands),
            len(unreachable),
            len(network.dynamic_edges),
            len(reroute_keys),
        )

        result = CycleResult(
            demands=demands,
            baseline=baseline,
            current=current,
            final=PassResult(
                MappingProxyType(final_paths), MappingProxyType(final_flow)
            ),
            disrupted=final_disrupted,
            affected_demands=frozenset(affected_demands),
            reroute_keys=frozenset(reroute_keys),
            alternative_mode_active=self._alternative_mode,
            unreachable=frozenset(unreachable),
        )
        self._last_result = result
        return result


def simulate(
    network: NetworkModel,
    blocked: Iterable[EdgeKey] = (),
    flow_scale: float = 1.0,
    config: Optional[SimulationConfig] = None,
) -> FlowAssignmentEngine:
    """Build an engine, apply blocks and flow scale, and run one cycle."""
    engine = FlowAssignmentEngine(network, config=config, flow_scale=flow_scale)
    engine.set_blocked(blocked)
    return engine
