"""Network definition loading (YAML/JSON) and validation."""

from freightflow.dsl.loader import load_network, load_network_yaml, parse_network

__all__ = ["load_network", "load_network_yaml", "parse_network"]
