"""Origin-destination demand derivation.

Demands follow a gravity/proportional-share model: each source ships its
scaled outbound volume, split over all sinks in proportion to their share of
total inbound volume.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.model.network import NetworkModel


@dataclass(frozen=True)
class DemandUnit:
    """Freight volume to move from ``source`` to ``sink`` in one cycle."""

    source: int
    sink: int
    amount: float

    @property
    def od(self) -> Tuple[int, int]:
        """Origin-destination pair; unique per cycle and used as the demand id."""
        return self.source, self.sink


class DemandGenerator:
    """Builds the per-cycle demand list from node volumes."""

    def __init__(
        self, network: NetworkModel, config: Optional[SimulationConfig] = None
    ) -> None:
        self.network = network
        self.config = config or DEFAULT_CONFIG

    def build_demands(self, flow_scale: float) -> List[DemandUnit]:
        """Derive OD demands for the given flow multiplier.

        Args:
            flow_scale: Multiplier applied to every source's outbound volume.

        Returns:
            Demands ordered by source then sink load order. Pairs with
            ``source == sink`` and amounts at or below the configured epsilon
            are omitted.
        """
        nodes = list(self.network.nodes.values())
        sources = [n for n in nodes if n.outbound > 0]
        sinks = [n for n in nodes if n.inbound > 0]

        total_inbound = sum(n.inbound for n in sinks) or 1.0
        demands: List[DemandUnit] = []
        for src in sources:
            out = src.outbound * flow_scale
            for dst in sinks:
                if src.id == dst.id:
                    continue
                amount = out * (dst.inbound / total_inbound)
                if amount > self.config.demand_epsilon:
                    demands.append(DemandUnit(src.id, dst.id, amount))
        return demands
