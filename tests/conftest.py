"""Shared fixtures: small transport networks with known flow outcomes.

Coordinates are chosen so that dynamic edge synthesis is either impossible
(every node pair farther apart than the hub radius) or produces a known set
of proximity links.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from freightflow.model.network import Edge, EdgeRole, NetworkModel, Node

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def triangle():
    """Three far-apart nodes joined by three main edges of equal length.

    A(1) ships 100; B(2) receives 60 and C(3) receives 40.
    Pairwise distances exceed 700 km, so no dynamic edges can be generated.
    """
    nodes = [
        Node(1, lat=50.0, lon=10.0, name="A", outbound=100.0, population=300.0),
        Node(2, lat=50.0, lon=20.0, name="B", inbound=60.0, population=200.0),
        Node(3, lat=56.0, lon=15.0, name="C", inbound=40.0, population=100.0),
    ]
    edges = [
        Edge(1, 2, length=100.0),
        Edge(1, 3, length=100.0),
        Edge(2, 3, length=100.0),
    ]
    return NetworkModel.build(nodes, edges)


@pytest.fixture
def alt_triangle():
    """Like ``triangle`` but B-C is a predefined alternative edge.

    With main edges only, A-B is the sole path to B.
    """
    nodes = [
        Node(1, lat=50.0, lon=10.0, name="A", outbound=100.0),
        Node(2, lat=50.0, lon=20.0, name="B", inbound=60.0),
        Node(3, lat=56.0, lon=15.0, name="C", inbound=40.0),
    ]
    edges = [
        Edge(1, 2, length=100.0),
        Edge(1, 3, length=100.0),
        Edge(2, 3, length=100.0, role=EdgeRole.ALT_PREDEFINED),
    ]
    return NetworkModel.build(nodes, edges)


@pytest.fixture
def near_pair_network():
    """Three close nodes (all within 150 km) with main edges A-B and A-C only.

    Blocking A-B leaves B reachable only through a dynamic B-C link.
    """
    nodes = [
        Node(1, lat=50.0, lon=10.0, name="A", outbound=100.0),
        Node(2, lat=50.0, lon=12.0, name="B", inbound=60.0),
        Node(3, lat=51.0, lon=11.0, name="C", inbound=40.0),
    ]
    edges = [
        Edge(1, 2, length=100.0),
        Edge(1, 3, length=100.0),
    ]
    return NetworkModel.build(nodes, edges)


@pytest.fixture
def corridor():
    """Six-node corridor network with one predefined alternative edge."""
    nodes = [
        Node(1, 53.55, 9.99, "Hamburg", "DE", "port", 1.8e6, 40.0, 120.0),
        Node(2, 52.52, 13.40, "Berlin", "DE", "hub", 3.6e6, 90.0, 30.0),
        Node(3, 52.37, 9.73, "Hannover", "DE", "hub", 0.5e6, 30.0, 20.0),
        Node(4, 50.11, 8.68, "Frankfurt", "DE", "hub", 0.75e6, 50.0, 60.0),
        Node(5, 48.14, 11.58, "Munich", "DE", "hub", 1.5e6, 70.0, 40.0),
        Node(6, 51.34, 12.37, "Leipzig", "DE", "hub", 0.6e6, 20.0, 10.0),
    ]
    edges = [
        Edge(1, 3, 150.0, edge_type="rail"),
        Edge(1, 2, 290.0, edge_type="rail"),
        Edge(3, 2, 285.0, edge_type="rail"),
        Edge(3, 4, 350.0, edge_type="rail"),
        Edge(4, 5, 390.0, edge_type="rail"),
        Edge(2, 6, 190.0, edge_type="rail"),
        Edge(6, 5, 430.0, edge_type="rail"),
        Edge(3, 6, 260.0, role=EdgeRole.ALT_PREDEFINED, edge_type="road"),
    ]
    return NetworkModel.build(nodes, edges)
