"""Argument validation against a tool's JSON-schema-like input schema.

Only the subset tools actually publish is understood: ``required`` and the
``type`` of each entry in ``properties``. String values for ``number``,
``integer`` and ``boolean`` parameters are converted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

_TRUE_FALSE = {"true": True, "false": False}


def _is_number_text(value: str) -> bool:
    try:
        float(value)
        return True
    except ValueError:
        return False


def _is_integer_text(value: str) -> bool:
    try:
        int(value.strip())
        return True
    except ValueError:
        return False


def is_valid_type(value: Any, expected_type: str) -> bool:
    """Check a value against a schema type name. Unknown types accept anything."""
    if value is None:
        return False
    if expected_type == "string":
        return isinstance(value, str)
    if expected_type == "number":
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        return isinstance(value, str) and _is_number_text(value)
    if expected_type == "integer":
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, str) and _is_integer_text(value)
    if expected_type == "boolean":
        if isinstance(value, bool):
            return True
        return isinstance(value, str) and value.lower() in _TRUE_FALSE
    if expected_type == "array":
        return isinstance(value, (list, tuple))
    if expected_type == "object":
        return isinstance(value, dict)
    return True


def _convert(value: Any, expected_type: str) -> Any:
    if not isinstance(value, str):
        return value
    if expected_type == "number":
        return float(value)
    if expected_type == "integer":
        return int(value.strip())
    if expected_type == "boolean":
        return _TRUE_FALSE[value.lower()]
    return value


def validate_arguments(
    schema: Optional[Dict[str, Any]],
    args: Dict[str, Any],
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Validate and convert arguments.

    Returns:
        ``(converted_args, None)`` on success, ``(None, error_message)`` otherwise.
    """
    schema = schema or {}
    args = dict(args or {})
    required = schema.get("required") or []
    properties = schema.get("properties") or {}

    for param in required:
        if param not in args:
            return None, f"Missing required parameter: {param}"

    converted = dict(args)
    for name, value in args.items():
        param_schema = properties.get(name)
        if not isinstance(param_schema, dict):
            continue
        expected_type = param_schema.get("type")
        if not expected_type:
            continue
        if not is_valid_type(value, expected_type):
            return None, f"Invalid type for parameter {name}: expected {expected_type}"
        converted[name] = _convert(value, expected_type)

    return converted, None
