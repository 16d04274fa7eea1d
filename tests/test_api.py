"""Tests for the top-level package API."""

import freightflow
from freightflow import EdgeKey, load_network, simulate


def test_version():
    assert freightflow.__version__ == "0.1.0"


def test_all_exports_resolve():
    for name in freightflow.__all__:
        assert hasattr(freightflow, name), name


def test_end_to_end(data_dir):
    network = load_network(data_dir / "corridor.yaml")
    engine = simulate(network, blocked=[EdgeKey.of(1, 2)], flow_scale=1.5)
    stats = engine.snapshot().summary()
    assert stats.flow_scale == 1.5
    assert stats.blocked_edges == 1
    assert stats.total_flow > 0
    assert engine.alternative_mode_active is True
