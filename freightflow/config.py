"""Configuration classes for FreightFlow components."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Tuning constants for demand, capacity, routing and dynamic edges."""

    # Flow multiplier bounds accepted by set_flow_scale
    min_flow_scale: float = 0.3
    max_flow_scale: float = 2.5

    # Demands at or below this amount are dropped
    demand_epsilon: float = 1e-3

    # Capacity = max(min_capacity, reference_load * capacity_factor)
    capacity_factor: float = 1.35
    min_capacity: float = 8.0

    # Idle edges are sized from this share of the median baseline load
    idle_share: float = 0.6

    # Dynamic edge synthesis radii (km)
    near_radius_km: float = 350.0
    hub_count: int = 8
    hub_radius_km: float = 600.0

    # Cost multipliers applied on top of physical length
    dynamic_penalty: float = 1.35
    predefined_alt_penalty: float = 1.12

    # Nominal freight estimates attached to synthesized edges
    near_freight_estimate: float = 30.0
    hub_freight_estimate: float = 40.0

    def clamp_flow_scale(self, value: float) -> float:
        """Clamp a requested flow multiplier into the accepted range."""
        return max(self.min_flow_scale, min(float(value), self.max_flow_scale))


# Global configuration instance
DEFAULT_CONFIG = SimulationConfig()
