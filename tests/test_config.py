"""Tests for SimulationConfig defaults and flow scale clamping."""

import dataclasses

import pytest

from freightflow.config import DEFAULT_CONFIG, SimulationConfig


class TestSimulationConfig:
    def test_defaults(self):
        cfg = SimulationConfig()
        assert cfg.min_flow_scale == 0.3
        assert cfg.max_flow_scale == 2.5
        assert cfg.demand_epsilon == 1e-3
        assert cfg.capacity_factor == 1.35
        assert cfg.min_capacity == 8.0
        assert cfg.idle_share == 0.6
        assert cfg.near_radius_km == 350.0
        assert cfg.hub_count == 8
        assert cfg.hub_radius_km == 600.0
        assert cfg.dynamic_penalty == 1.35
        assert cfg.predefined_alt_penalty == 1.12

    def test_default_instance(self):
        assert DEFAULT_CONFIG == SimulationConfig()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.hub_count = 3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "requested, expected",
        [(0.1, 0.3), (0.3, 0.3), (1.0, 1.0), (2.5, 2.5), (5.0, 2.5), (-1.0, 0.3)],
    )
    def test_clamp_flow_scale(self, requested, expected):
        assert DEFAULT_CONFIG.clamp_flow_scale(requested) == expected

    def test_clamp_uses_custom_bounds(self):
        cfg = SimulationConfig(min_flow_scale=0.5, max_flow_scale=1.5)
        assert cfg.clamp_flow_scale(0.1) == 0.5
        assert cfg.clamp_flow_scale(3) == 1.5
