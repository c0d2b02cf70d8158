"""Planner collaborator and the prompts the engine sends it."""

from .planner import (
    Planner,
    ChatPlanner,
    GeminiPlanner,
    create_planner,
)
from .prompts import (
    build_aggregation_prompt,
    build_condition_prompt,
    should_stop,
)

__all__ = [
    "Planner",
    "ChatPlanner",
    "GeminiPlanner",
    "create_planner",
    "build_aggregation_prompt",
    "build_condition_prompt",
    "should_stop",
]
