"""Routing graph primitives.

This package provides `RoutingGraph`, a strict `networkx.MultiDiGraph`
subclass, and `build_adjacency()` for building it from a network model.
"""
