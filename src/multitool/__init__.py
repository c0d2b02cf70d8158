"""multitool: multi-step tool plan execution."""

__version__ = "0.1.0"

from multitool.errors import (
    MultiToolError,
    PlanInvalidError,
    CycleDetectedError,
    DependencyUnsatisfiedError,
    ToolInvocationFault,
    AggregationEmptyError,
    PlannerError,
)
from multitool.plan import (
    PlanType,
    Step,
    Plan,
    StepResult,
    DependencyAnalyzer,
    parse_plan,
    load_plan,
    plan_to_json,
)
from multitool.execution import (
    ExecutionEngine,
    VariableResolver,
    ResultAggregator,
)
from multitool.tools import (
    ToolInvoker,
    ToolRegistry,
    HttpToolInvoker,
    RetryConfig,
)
from multitool.llm import (
    Planner,
    ChatPlanner,
    GeminiPlanner,
    create_planner,
)

__all__ = [
    "__version__",
    # Errors
    "MultiToolError",
    "PlanInvalidError",
    "CycleDetectedError",
    "DependencyUnsatisfiedError",
    "ToolInvocationFault",
    "AggregationEmptyError",
    "PlannerError",
    # Plans
    "PlanType",
    "Step",
    "Plan",
    "StepResult",
    "DependencyAnalyzer",
    "parse_plan",
    "load_plan",
    "plan_to_json",
    # Execution
    "ExecutionEngine",
    "VariableResolver",
    "ResultAggregator",
    # Tools
    "ToolInvoker",
    "ToolRegistry",
    "HttpToolInvoker",
    "RetryConfig",
    # Planner
    "Planner",
    "ChatPlanner",
    "GeminiPlanner",
    "create_planner",
]
