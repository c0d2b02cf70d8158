"""Tests for tool argument validation."""

import pytest

from multitool.tools.schema import is_valid_type, validate_arguments

SCHEMA = {
    "type": "object",
    "properties": {
        "city": {"type": "string"},
        "days": {"type": "integer"},
        "threshold": {"type": "number"},
        "metric": {"type": "boolean"},
        "tags": {"type": "array"},
        "extra": {"description": "untyped"},
    },
    "required": ["city"],
}


class TestIsValidType:
    """Tests for is_valid_type."""

    @pytest.mark.parametrize("value,expected_type", [
        ("x", "string"),
        (3, "number"),
        (2.5, "number"),
        ("2.5", "number"),
        (4, "integer"),
        ("4", "integer"),
        (True, "boolean"),
        ("false", "boolean"),
        ([1], "array"),
        ({"a": 1}, "object"),
        ("anything", "custom"),
    ])
    def test_accepts(self, value, expected_type):
        assert is_valid_type(value, expected_type)

    @pytest.mark.parametrize("value,expected_type", [
        (3, "string"),
        ("abc", "number"),
        (True, "number"),
        ("4.5", "integer"),
        (False, "integer"),
        ("yes", "boolean"),
        (None, "string"),
        (None, "custom"),
    ])
    def test_rejects(self, value, expected_type):
        assert not is_valid_type(value, expected_type)


class TestValidateArguments:
    """Tests for validate_arguments."""

    def test_missing_required(self):
        converted, error = validate_arguments(SCHEMA, {"days": 3})

        assert converted is None
        assert error == "Missing required parameter: city"

    def test_type_mismatch(self):
        converted, error = validate_arguments(SCHEMA, {"city": "Lisbon", "days": "many"})

        assert converted is None
        assert error == "Invalid type for parameter days: expected integer"

    def test_converts_strings(self):
        """Test numeric and boolean strings are converted."""
        converted, error = validate_arguments(
            SCHEMA, {"city": "Lisbon", "days": "3", "threshold": "0.5", "metric": "TRUE"}
        )

        assert error is None
        assert converted == {"city": "Lisbon", "days": 3, "threshold": 0.5, "metric": True}

    def test_unknown_and_untyped_params_pass(self):
        converted, error = validate_arguments(SCHEMA, {"city": "Lisbon", "extra": 1, "other": None})

        assert error is None
        assert converted["other"] is None

    def test_empty_schema(self):
        assert validate_arguments(None, {"a": 1}) == ({"a": 1}, None)

    def test_input_not_mutated(self):
        args = {"city": "Lisbon", "days": "3"}

        validate_arguments(SCHEMA, args)

        assert args["days"] == "3"
