"""Tests for gravity-model demand derivation."""

import pytest

from freightflow.config import SimulationConfig
from freightflow.model.demand import DemandGenerator, DemandUnit
from freightflow.model.network import NetworkModel, Node


def _model(*nodes):
    return NetworkModel.build(nodes, [])


class TestDemandGenerator:
    def test_proportional_split(self, triangle):
        demands = DemandGenerator(triangle).build_demands(1.0)
        assert [d.od for d in demands] == [(1, 2), (1, 3)]
        assert [d.amount for d in demands] == pytest.approx([60.0, 40.0])

    def test_flow_scale_multiplies_amounts(self, triangle):
        demands = DemandGenerator(triangle).build_demands(2.0)
        assert [d.amount for d in demands] == pytest.approx([120.0, 80.0])

    def test_ordering_follows_load_order(self):
        model = _model(
            Node(3, 0, 0, outbound=10, inbound=10),
            Node(1, 0, 1, outbound=10, inbound=10),
            Node(2, 0, 2, inbound=20),
        )
        ods = [d.od for d in DemandGenerator(model).build_demands(1.0)]
        assert ods == [(3, 1), (3, 2), (1, 3), (1, 2)]

    def test_no_self_demand(self):
        model = _model(
            Node(1, 0, 0, outbound=50, inbound=50),
            Node(2, 0, 1, inbound=50),
        )
        demands = DemandGenerator(model).build_demands(1.0)
        assert all(d.source != d.sink for d in demands)
        # The self-share is not redistributed
        assert demands == [DemandUnit(1, 2, 25.0)]

    def test_epsilon_filter(self):
        model = _model(
            Node(1, 0, 0, outbound=0.001),
            Node(2, 0, 1, inbound=1.0),
            Node(3, 0, 2, outbound=0.002),
        )
        demands = DemandGenerator(model).build_demands(1.0)
        assert [d.od for d in demands] == [(3, 2)]

    def test_custom_epsilon(self):
        model = _model(Node(1, 0, 0, outbound=5), Node(2, 0, 1, inbound=1))
        cfg = SimulationConfig(demand_epsilon=10.0)
        assert DemandGenerator(model, cfg).build_demands(1.0) == []

    def test_no_sources_or_sinks(self):
        model = _model(Node(1, 0, 0, outbound=10), Node(2, 0, 1))
        assert DemandGenerator(model).build_demands(1.0) == []
        model = _model(Node(1, 0, 0, inbound=10), Node(2, 0, 1))
        assert DemandGenerator(model).build_demands(1.0) == []

    def test_empty_network(self):
        assert DemandGenerator(NetworkModel()).build_demands(1.0) == []

    def test_od_pairs_unique(self, corridor):
        demands = DemandGenerator(corridor).build_demands(1.0)
        ods = [d.od for d in demands]
        assert len(ods) == len(set(ods))

    def test_demand_unit_od(self):
        assert DemandUnit(4, 9, 1.0).od == (4, 9)
