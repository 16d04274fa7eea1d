"""Logical edge capacity derived from baseline load."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.model.network import EdgeKey


class CapacityModel:
    """Sizes original edges relative to their baseline (undisrupted) flow.

    An edge with baseline flow ``b > 0`` gets ``b * capacity_factor``. Idle
    edges are sized from a share of the median positive baseline so that they
    are not overloaded by their first small detour load. Every capacity is
    floored at ``min_capacity``.
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def median_load(self, baseline: Mapping[EdgeKey, float]) -> float:
        """Upper median of strictly positive baseline flows.

        Falls back to ``min_capacity`` when no edge carries baseline flow.
        """
        values = sorted(v for v in baseline.values() if v > 0)
        if not values:
            return self.config.min_capacity
        return values[len(values) // 2]

    def _capacity(self, base: float, median: float) -> float:
        reference = base if base > 0 else median * self.config.idle_share
        return max(self.config.min_capacity, reference * self.config.capacity_factor)

    def capacity_of(self, key: EdgeKey, baseline: Mapping[EdgeKey, float]) -> float:
        """Capacity of one edge for the given baseline table."""
        return self._capacity(baseline.get(key, 0.0), self.median_load(baseline))

    def capacity_table(
        self, baseline: Mapping[EdgeKey, float], keys: Iterable[EdgeKey]
    ) -> Dict[EdgeKey, float]:
        """Capacities for many keys, sharing one median computation."""
        median = self.median_load(baseline)
        return {k: self._capacity(baseline.get(k, 0.0), median) for k in keys}

    @staticmethod
    def is_overloaded(flow: float, capacity: float) -> bool:
        return flow > capacity
