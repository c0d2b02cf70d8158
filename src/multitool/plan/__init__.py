"""Plan data model, structural analysis and wire format."""

from .models import (
    PlanType,
    Step,
    Plan,
    StepResult,
)
from .analyzer import (
    DependencyAnalyzer,
)
from .plan_io import (
    PlanFormatError,
    load_plan,
    parse_plan,
    plan_from_dict,
    plan_to_dict,
    plan_to_json,
)

__all__ = [
    # Models
    "PlanType",
    "Step",
    "Plan",
    "StepResult",
    # Analyzer
    "DependencyAnalyzer",
    # I/O
    "PlanFormatError",
    "load_plan",
    "parse_plan",
    "plan_from_dict",
    "plan_to_dict",
    "plan_to_json",
]
