"""Tests for YAML key normalization, legacy aliases and number coercion."""

import math

import pytest
import yaml

from freightflow.utils.yaml_utils import (
    LEGACY_FIELD_ALIASES,
    apply_field_aliases,
    coerce_number,
    load_yaml,
    normalize_yaml_dict_keys,
)


class TestNormalizeKeys:
    def test_boolean_keys_become_strings(self):
        data = yaml.safe_load("yes: 1\nno: 2\nname: x")
        assert normalize_yaml_dict_keys(data) == {"True": 1, "False": 2, "name": "x"}

    def test_numeric_keys_become_strings(self):
        assert normalize_yaml_dict_keys({1: "a"}) == {"1": "a"}


class TestLoadYaml:
    @pytest.mark.parametrize("scalar", ["NO", "no", "Yes", "on", "OFF", "y", "n"])
    def test_yaml11_words_stay_strings(self, scalar):
        assert load_yaml(f"value: {scalar}") == {"value": scalar}

    @pytest.mark.parametrize(
        "scalar, expected",
        [("true", True), ("False", False), ("TRUE", True)],
    )
    def test_true_false_still_booleans(self, scalar, expected):
        assert load_yaml(f"value: {scalar}")["value"] is expected

    def test_other_scalars_unchanged(self):
        data = load_yaml("a: 1\nb: 2.5\nc: null\nd: text")
        assert data == {"a": 1, "b": 2.5, "c": None, "d": "text"}


class TestFieldAliases:
    def test_all_legacy_names_mapped(self):
        legacy = {name: i for i, name in enumerate(LEGACY_FIELD_ALIASES)}
        result = apply_field_aliases(legacy)
        assert set(result) == set(LEGACY_FIELD_ALIASES.values())

    def test_unknown_keys_kept(self):
        assert apply_field_aliases({"colour": "red"}) == {"colour": "red"}

    def test_canonical_key_wins(self):
        assert apply_field_aliases({"distanz_km": 5, "length": 7}) == {"length": 7}


class TestCoerceNumber:
    @pytest.mark.parametrize(
        "value, integer, expected",
        [
            ("12", True, 12),
            (" 12 ", True, 12),
            ("12.0", True, 12),
            (12.0, True, 12),
            ("3.5", False, 3.5),
            ("7", False, 7.0),
            (4, False, 4),
        ],
    )
    def test_coercion(self, value, integer, expected):
        result = coerce_number(value, integer=integer)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize("value", ["abc", 1.5, None, True])
    def test_non_integer_values_unchanged(self, value):
        assert coerce_number(value, integer=True) is value

    def test_fractional_string_left_for_schema_check(self):
        assert coerce_number("1.5", integer=True) == 1.5

    def test_non_numeric_string_unchanged(self):
        assert coerce_number("north") == "north"

    def test_nan_string_parses_as_float(self):
        assert math.isnan(coerce_number("nan"))
