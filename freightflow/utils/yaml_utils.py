"""Utilities for handling YAML parsing quirks and legacy field names."""

import math
import re
from typing import Any, Dict, Mapping, TypeVar

import yaml

V = TypeVar("V")

_BOOL_TAG = "tag:yaml.org,2002:bool"


class NetworkYamlLoader(yaml.SafeLoader):
    """SafeLoader that resolves only true/false as booleans.

    Plain YAML 1.1 turns ``NO``, ``yes``, ``on`` and ``off`` into booleans,
    which corrupts region codes such as Norway's ``NO``. This loader keeps
    those scalars as strings.
    """


NetworkYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
NetworkYamlLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_yaml(text: str) -> Any:
    """Parse YAML text with `NetworkYamlLoader`."""
    return yaml.load(text, Loader=NetworkYamlLoader)

#: Field names used by older network exports, mapped to canonical names.
LEGACY_FIELD_ALIASES: Dict[str, str] = {
    "von_id": "source",
    "zu_id": "target",
    "distanz_km": "length",
    "fracht_schaetzung": "freight_estimate",
    "typ": "type",
    "land": "region",
    "einwohner": "population",
    "gueter_in": "inbound",
    "gueter_out": "outbound",
}


def normalize_yaml_dict_keys(data: Dict[Any, V]) -> Dict[str, V]:
    """Normalize dictionary keys from YAML parsing to ensure consistent string keys.

    YAML 1.1 boolean keys (e.g., true, false, yes, no, on, off) get converted to
    Python True/False boolean values. This function converts them to predictable
    string representations ("True"/"False") and ensures all keys are strings.

    Examples:
        >>> normalize_yaml_dict_keys({True: "value1", "normal": "value3"})
        {'True': 'value1', 'normal': 'value3'}
    """
    return {str(key): value for key, value in data.items()}


def apply_field_aliases(
    data: Mapping[Any, V], aliases: Mapping[str, str] = LEGACY_FIELD_ALIASES
) -> Dict[str, V]:
    """Rename legacy keys to canonical ones; canonical keys win on conflict."""
    normalized = normalize_yaml_dict_keys(dict(data))
    result: Dict[str, V] = {}
    for key, value in normalized.items():
        canonical = aliases.get(key, key)
        if canonical != key and canonical in normalized:
            continue
        result[canonical] = value
    return result


def coerce_number(value: Any, integer: bool = False) -> Any:
    """Convert numeric strings (and integral floats when ``integer``) to numbers.

    Values that cannot be converted are returned unchanged so that schema
    validation reports them.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text) if integer else float(text)
        except ValueError:
            if not integer:
                return value
            try:
                value = float(text)
            except ValueError:
                return value
    if (
        integer
        and isinstance(value, float)
        and math.isfinite(value)
        and value.is_integer()
    ):
        return int(value)
    return value
