"""FreightFlow: freight flow redistribution on transport networks.

FreightFlow assigns origin-destination freight demand to a geographic
transport network by shortest path, sizes edge capacity from an undisrupted
baseline, and reroutes affected demand over alternative edges when main
edges are blocked or overloaded.

Primary API:
    load_network() - Load and validate a network definition file
    NetworkModel, Node, Edge, EdgeKey - Network topology model
    FlowAssignmentEngine - Recalculation engine and command surface
    simulate() - One-shot engine run with blocks and a flow scale

Example:
    from freightflow import EdgeKey, load_network, simulate

    network = load_network("network.yaml")
    engine = simulate(network, blocked=[EdgeKey.of(1, 2)], flow_scale=1.5)
    stats = engine.snapshot().summary()
"""

from __future__ import annotations

from freightflow import cli, logging
from freightflow._version import __version__
from freightflow.config import DEFAULT_CONFIG, SimulationConfig
from freightflow.dsl.loader import load_network, load_network_yaml, parse_network
from freightflow.flow.engine import (
    CycleResult,
    FlowAssignmentEngine,
    PassResult,
    simulate,
)
from freightflow.model.capacity import CapacityModel
from freightflow.model.demand import DemandGenerator, DemandUnit
from freightflow.model.network import (
    Edge,
    EdgeKey,
    EdgeKind,
    EdgeRole,
    EdgeState,
    LoadError,
    NetworkModel,
    Node,
)
from freightflow.results.snapshot import EdgeReport, NetworkSnapshot, NetworkStats

__all__ = [
    # Version
    "__version__",
    # Model
    "NetworkModel",
    "Node",
    "Edge",
    "EdgeKey",
    "EdgeKind",
    "EdgeRole",
    "EdgeState",
    "LoadError",
    "DemandUnit",
    "DemandGenerator",
    "CapacityModel",
    # Engine
    "FlowAssignmentEngine",
    "CycleResult",
    "PassResult",
    "simulate",
    # Results
    "NetworkSnapshot",
    "EdgeReport",
    "NetworkStats",
    # Loading and configuration
    "load_network",
    "load_network_yaml",
    "parse_network",
    "SimulationConfig",
    "DEFAULT_CONFIG",
    # Utilities
    "cli",
    "logging",
]
