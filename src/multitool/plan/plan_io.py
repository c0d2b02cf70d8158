"""
Plan I/O utilities: parse and serialize the JSON plan format.

A plan document looks like::

    {
      "planType": "PARALLEL",
      "steps": [
        {"id": "a", "serverId": "weather", "toolName": "forecast",
         "parameters": {"city": "Lisbon"}, "dependencies": []}
      ],
      "conditionPrompt": null,
      "aggregationPrompt": "Summarize the forecasts"
    }

Parsing never raises. A malformed document becomes an empty SEQUENTIAL plan,
which the analyzer then rejects as invalid.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from multitool.plan.models import Plan, PlanType, Step

logger = logging.getLogger(__name__)

# Accepted spellings per field, camelCase first
_PLAN_TYPE_KEYS = ("planType", "plan_type", "type")
_CONDITION_KEYS = ("conditionPrompt", "condition_prompt", "condition")
_AGGREGATION_KEYS = ("aggregationPrompt", "aggregation_prompt", "aggregation")
_SERVER_KEYS = ("serverId", "server_id", "server")
_TOOL_KEYS = ("toolName", "tool_name", "tool")
_PARAMETER_KEYS = ("parameters", "params", "arguments")
_DEPENDENCY_KEYS = ("dependencies", "depends_on", "dependsOn")


class PlanFormatError(ValueError):
    """Raised internally when a plan document has the wrong shape."""


def _first(data: Dict[str, Any], keys: tuple, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _extract_json(content: str) -> str:
    """Extract the JSON document from text (handles markdown code blocks)."""
    content = (content or "").strip()

    if content.startswith("```"):
        lines = content.split("\n")
        json_lines = []
        in_json = False
        for line in lines:
            if line.startswith("```"):
                in_json = not in_json
                continue
            if in_json:
                json_lines.append(line)
        content = "\n".join(json_lines).strip()

    if not content.startswith("{"):
        start = content.find("{")
        end = content.rfind("}")
        if start != -1 and end > start:
            content = content[start:end + 1]

    return content


def _optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PlanFormatError(f"{field_name} must be a string")
    return value


def _step_from_dict(data: Any, index: int) -> Step:
    if not isinstance(data, dict):
        raise PlanFormatError(f"step {index} is not an object")

    parameters = _first(data, _PARAMETER_KEYS, {}) or {}
    if not isinstance(parameters, dict):
        raise PlanFormatError(f"step {index} parameters must be an object")

    dependencies = _first(data, _DEPENDENCY_KEYS, []) or []
    if isinstance(dependencies, str):
        dependencies = [dependencies]
    if not isinstance(dependencies, list):
        raise PlanFormatError(f"step {index} dependencies must be a list")

    return Step(
        id=str(data.get("id") or ""),
        server_id=str(_first(data, _SERVER_KEYS, "") or ""),
        tool_name=str(_first(data, _TOOL_KEYS, "") or ""),
        parameters={str(k): v for k, v in parameters.items()},
        dependencies=tuple(str(d) for d in dependencies),
    )


def plan_from_dict(data: Any) -> Plan:
    """Build a plan from a decoded JSON object.

    Raises:
        PlanFormatError: If the document has the wrong shape.
    """
    if not isinstance(data, dict):
        raise PlanFormatError(f"expected a JSON object, got {type(data).__name__}")

    raw_type = _first(data, _PLAN_TYPE_KEYS)
    try:
        plan_type = PlanType.parse(raw_type) if raw_type is not None else PlanType.SEQUENTIAL
    except ValueError as e:
        raise PlanFormatError(str(e)) from e

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise PlanFormatError("steps must be a list")

    return Plan(
        plan_type=plan_type,
        steps=tuple(_step_from_dict(step, i) for i, step in enumerate(raw_steps)),
        condition_prompt=_optional_text(_first(data, _CONDITION_KEYS), "conditionPrompt"),
        aggregation_prompt=_optional_text(_first(data, _AGGREGATION_KEYS), "aggregationPrompt"),
    )


def parse_plan(text: str) -> Plan:
    """Parse plan text, degrading to an empty SEQUENTIAL plan on any error."""
    json_str = _extract_json(text)
    try:
        return plan_from_dict(json.loads(json_str))
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid plan JSON, using empty plan: {e}")
        logger.debug(f"Raw plan text: {(text or '')[:500]}...")
    except PlanFormatError as e:
        logger.warning(f"Malformed plan document, using empty plan: {e}")
    return Plan()


def load_plan(path: Union[str, Path]) -> Plan:
    """Read and parse a plan file. Missing or unreadable files give an empty plan."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_plan(f.read())
    except OSError as e:
        logger.warning(f"Could not read plan file {path}: {e}")
        return Plan()


def step_to_dict(step: Step) -> Dict[str, Any]:
    return {
        "id": step.id,
        "serverId": step.server_id,
        "toolName": step.tool_name,
        "parameters": dict(step.parameters),
        "dependencies": list(step.dependencies),
    }


def plan_to_dict(plan: Plan) -> Dict[str, Any]:
    """Convert a plan to the wire dictionary."""
    steps: List[Dict[str, Any]] = [step_to_dict(step) for step in plan.steps]
    return {
        "planType": plan.plan_type.value,
        "steps": steps,
        "conditionPrompt": plan.condition_prompt,
        "aggregationPrompt": plan.aggregation_prompt,
    }


def plan_to_json(plan: Plan, indent: Optional[int] = 2) -> str:
    return json.dumps(plan_to_dict(plan), indent=indent, ensure_ascii=False)
