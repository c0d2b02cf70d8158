"""Error taxonomy for plan execution.

Structural errors (invalid plan, cycle) are raised by the analyzer before any
tool is invoked. Transport faults are raised by tool adapters and retried.
Logical tool failures are never raised: they travel as a ``StepResult`` with
``success=False``. The engine converts everything in this module into a
structured failure result.
"""

from __future__ import annotations

from typing import Optional


class MultiToolError(Exception):
    """Base class for all multitool errors."""


class PlanInvalidError(MultiToolError):
    """Raised when a plan fails structural validation."""

    def __init__(self, reason: str, step_id: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.step_id = step_id


class CycleDetectedError(MultiToolError):
    """Raised when a plan contains a circular dependency chain."""

    def __init__(self, path: Optional[list[str]] = None):
        self.path = list(path or [])
        detail = " -> ".join(self.path) if self.path else "unknown path"
        super().__init__(f"Circular dependency detected: {detail}")


class DependencyUnsatisfiedError(MultiToolError):
    """Raised when a step's dependencies are missing or failed."""

    def __init__(self, step_id: str, missing: Optional[list[str]] = None):
        self.step_id = step_id
        self.missing = list(missing or [])
        super().__init__(f"Dependencies not satisfied for step: {step_id}")


class ToolInvocationFault(MultiToolError):
    """Transport-level fault while invoking a tool. Retryable."""

    def __init__(self, message: str, status_code: Optional[int] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


class AggregationEmptyError(MultiToolError):
    """Raised when there is nothing to aggregate."""

    def __init__(self):
        super().__init__("No results to aggregate")


class PlannerError(MultiToolError):
    """Raised when the planner (LLM) call fails."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
