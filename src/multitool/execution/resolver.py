"""Variable resolution for step parameters.

String parameter values may reference earlier outputs with
``${stepId.field}``. Supported fields:

- ``result`` / ``content``: the step's content
- ``success``: ``"true"`` or ``"false"``
- ``message``: the step's message
- anything else: the step's content

References to steps that are absent or failed are left as written.
"""

import logging
import re
from typing import Any, Dict, Optional, Protocol

from multitool.plan.models import Step, StepResult

logger = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(r"\$\{([^.}]+)\.([^}]+)\}")

PATH_PARAMETER = "path"
_PATH_SEPARATORS = "/\\"


class ResultLookup(Protocol):
    def get(self, key: str) -> Optional[StepResult]:
        ...


def extract_field(result: StepResult, field: str) -> str:
    if field == "success":
        return "true" if result.success else "false"
    if field == "message":
        return result.message or ""
    return result.content if result.content is not None else ""


def references(value: Any, step_id: str) -> bool:
    """True if ``value`` is a string holding a ``${step_id.…}`` reference."""
    if not isinstance(value, str):
        return False
    return any(match.group(1) == step_id for match in VARIABLE_PATTERN.finditer(value))


class VariableResolver:
    """Substitutes ``${stepId.field}`` references with recorded outputs."""

    def resolve_text(self, value: str, results: ResultLookup) -> str:
        def _replace(match: re.Match) -> str:
            step_id, field = match.group(1), match.group(2)
            result = results.get(step_id)
            if result is None or not result.success:
                return match.group(0)
            return extract_field(result, field)

        return VARIABLE_PATTERN.sub(_replace, value)

    def resolve(self, step: Step, results: ResultLookup) -> Dict[str, Any]:
        """Return a resolved copy of the step's parameters.

        Neither the step nor ``results`` is modified.
        """
        resolved = dict(step.parameters)

        for key, value in resolved.items():
            if not isinstance(value, str):
                continue
            new_value = self.resolve_text(value, results)

            # Keep file paths relative to the tool's sandbox
            if key == PATH_PARAMETER and new_value[:1] in _PATH_SEPARATORS and new_value:
                sanitized = new_value.lstrip(_PATH_SEPARATORS)
                logger.debug(f"Sanitized path from '{new_value}' to '{sanitized}'")
                new_value = sanitized

            resolved[key] = new_value

        return resolved
