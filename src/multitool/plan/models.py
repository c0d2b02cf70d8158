from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class PlanType(Enum):
    SEQUENTIAL = "SEQUENTIAL"
    PARALLEL = "PARALLEL"
    CHAINED = "CHAINED"
    CONDITIONAL = "CONDITIONAL"
    COMPETITIVE = "COMPETITIVE"
    ITERATIVE = "ITERATIVE"

    @classmethod
    def parse(cls, value: Any) -> "PlanType":
        """Look up a plan type by name, case-insensitively.

        Raises:
            ValueError: If the value names no plan type.
        """
        if isinstance(value, PlanType):
            return value
        name = str(value or "").strip().upper()
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown plan type: {value!r}") from None

    @property
    def requires_condition(self) -> bool:
        return self in (PlanType.CONDITIONAL, PlanType.ITERATIVE)


@dataclass(frozen=True)
class Step:
    """One capability call: ``tool_name`` on ``server_id`` with ``parameters``.

    Parameter values are literals or strings holding ``${stepId.field}``
    references that are resolved against earlier results at run time.
    """
    id: str
    server_id: str
    tool_name: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    dependencies: Tuple[str, ...] = ()

    def __post_init__(self):
        # Frozen, so normalize through object.__setattr__
        object.__setattr__(self, "parameters", dict(self.parameters or {}))
        object.__setattr__(self, "dependencies", tuple(self.dependencies or ()))

    @property
    def capability(self) -> str:
        return f"{self.server_id}:{self.tool_name}"

    @property
    def has_dependencies(self) -> bool:
        return len(self.dependencies) > 0

    def depends_on(self, step_id: str) -> bool:
        return step_id in self.dependencies

    def is_valid(self) -> bool:
        for value in (self.id, self.server_id, self.tool_name):
            if not isinstance(value, str) or not value.strip():
                return False
        return not self.depends_on(self.id)


@dataclass(frozen=True)
class Plan:
    plan_type: PlanType = PlanType.SEQUENTIAL
    steps: Tuple[Step, ...] = ()
    condition_prompt: Optional[str] = None
    aggregation_prompt: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps or ()))

    @property
    def is_empty(self) -> bool:
        return len(self.steps) == 0

    def get_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def independent_steps(self) -> Tuple[Step, ...]:
        return tuple(step for step in self.steps if not step.has_dependencies)

    def dependent_steps(self) -> Tuple[Step, ...]:
        return tuple(step for step in self.steps if step.has_dependencies)

    def __str__(self) -> str:
        return (
            f"Plan(type={self.plan_type.value}, steps={len(self.steps)}, "
            f"has_condition={self.condition_prompt is not None}, "
            f"has_aggregation={self.aggregation_prompt is not None})"
        )


@dataclass(frozen=True)
class StepResult:
    """Outcome of one tool invocation, or of a whole plan.

    ``error`` carries the last exception for transport faults and is ``None``
    for logical failures reported by the tool itself.
    """
    success: bool
    content: Optional[str] = None
    message: str = ""
    error: Optional[BaseException] = field(default=None, compare=False)

    @classmethod
    def ok(cls, content: Optional[str], message: str = "Success") -> "StepResult":
        return cls(success=True, content=content, message=message)

    @classmethod
    def fail(cls, message: str, error: Optional[BaseException] = None) -> "StepResult":
        return cls(success=False, content=None, message=message, error=error)
