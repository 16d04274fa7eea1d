"""Network model package.

Defines the transport network data model (nodes, edges, edge keys and
per-edge state) together with demand derivation and capacity sizing.
"""

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

__all__ = [
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
]
