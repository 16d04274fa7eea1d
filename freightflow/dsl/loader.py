"""YAML/JSON loader + schema validation for network definitions.

Provides entrypoints to parse a network file or string, normalize legacy field
names and numeric strings, validate against the packaged JSON schema, and
build a `NetworkModel`. Every failure surfaces as `LoadError`.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import jsonschema
import yaml

from freightflow.logging import get_logger
from freightflow.model.network import Edge, EdgeRole, LoadError, NetworkModel, Node
from freightflow.utils.yaml_utils import apply_field_aliases, coerce_number, load_yaml

logger = get_logger(__name__)

_NODE_NUMBER_FIELDS = ("lat", "lon", "population", "inbound", "outbound")
_EDGE_NUMBER_FIELDS = ("length", "freight_estimate")


def _load_schema() -> Dict[str, Any]:
    with (
        resources.files("freightflow.schemas")
        .joinpath("network.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def _normalize_entry(
    entry: Any, what: str, int_fields: Tuple[str, ...], number_fields: Tuple[str, ...]
) -> Dict[str, Any]:
    if not isinstance(entry, dict):
        raise LoadError(f"Each {what} definition must be a mapping")
    data = apply_field_aliases(entry)
    for name in int_fields:
        if name in data:
            data[name] = coerce_number(data[name], integer=True)
    for name in number_fields:
        if name in data:
            data[name] = coerce_number(data[name])
    return data


def normalize_network_dict(data: Any) -> Dict[str, Any]:
    """Return a canonical network mapping with aliases and numbers normalized.

    Raises:
        LoadError: If the top-level shape is wrong.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LoadError("The network definition must map to a dictionary at top-level.")
    data = apply_field_aliases(data)

    if "nodes" in data:
        if not isinstance(data["nodes"], list):
            raise LoadError("'nodes' must be a list")
        data["nodes"] = [
            _normalize_entry(n, "node", ("id",), _NODE_NUMBER_FIELDS)
            for n in data["nodes"]
        ]
    if "edges" in data:
        if not isinstance(data["edges"], list):
            raise LoadError("'edges' must be a list")
        data["edges"] = [
            _normalize_entry(e, "edge", ("source", "target"), _EDGE_NUMBER_FIELDS)
            for e in data["edges"]
        ]
    return data


def parse_network(data: Any) -> Tuple[List[Node], List[Edge]]:
    """Validate a raw network mapping and convert it to nodes and edges.

    Raises:
        LoadError: On shape or schema violations.
    """
    canonical = normalize_network_dict(data)
    try:
        jsonschema.validate(canonical, _load_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        logger.error(
            "Network schema validation failed at %s: %s", location, exc.message
        )
        raise LoadError(
            f"Invalid network definition at {location}: {exc.message}"
        ) from exc

    nodes = [
        Node(
            id=n["id"],
            lat=float(n["lat"]),
            lon=float(n["lon"]),
            name=str(n.get("name") or ""),
            region=str(n.get("region") or ""),
            node_type=str(n.get("type") or ""),
            population=float(n.get("population") or 0.0),
            inbound=float(n.get("inbound") or 0.0),
            outbound=float(n.get("outbound") or 0.0),
        )
        for n in canonical["nodes"]
    ]
    edges = [
        Edge(
            source=e["source"],
            target=e["target"],
            length=float(e.get("length") or 1.0),
            role=EdgeRole.from_string(e.get("role", EdgeRole.MAIN.value)),
            edge_type=str(e.get("type") or ""),
            freight_estimate=float(e.get("freight_estimate") or 0.0),
        )
        for e in canonical["edges"]
    ]
    return nodes, edges


def load_network_yaml(text: str) -> NetworkModel:
    """Parse a YAML (or JSON) string into a validated `NetworkModel`.

    Raises:
        LoadError: If the text cannot be parsed or the network is invalid.
    """
    try:
        data = load_yaml(text)
    except yaml.YAMLError as exc:
        raise LoadError(f"Failed to parse network definition: {exc}") from exc
    nodes, edges = parse_network(data)
    return NetworkModel.build(nodes, edges)


def load_network(path: Union[str, Path]) -> NetworkModel:
    """Load a network definition file (``.yaml``, ``.yml`` or ``.json``).

    Raises:
        LoadError: If the file is missing, unreadable or invalid.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"Cannot read network file '{path}': {exc}") from exc
    network = load_network_yaml(text)
    logger.info(
        "Loaded network '%s': %d nodes, %d edges",
        path.name,
        len(network.nodes),
        len(network.original_edges),
    )
    return network
