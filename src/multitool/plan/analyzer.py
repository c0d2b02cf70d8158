"""Structural checks for plans: well-formedness and dependency cycles.

Both checks run before the engine invokes anything, so a rejected plan has no
side effects.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Set

from multitool.errors import CycleDetectedError, PlanInvalidError
from multitool.plan.models import Plan, Step

logger = logging.getLogger(__name__)


class DependencyAnalyzer:
    """Validates plan structure and detects circular dependencies."""

    def validate(self, plan: Plan) -> Optional[PlanInvalidError]:
        """Return the first structural problem in ``plan``, or ``None``."""
        if plan is None or plan.is_empty:
            return PlanInvalidError("plan has no steps")

        seen = set()
        for index, step in enumerate(plan.steps):
            if not step.is_valid():
                if step.id and step.depends_on(step.id):
                    return PlanInvalidError(f"step '{step.id}' depends on itself", step_id=step.id)
                return PlanInvalidError(
                    f"step {index + 1} is missing an id, server id or tool name",
                    step_id=step.id or None,
                )
            if step.id in seen:
                return PlanInvalidError(f"duplicate step id '{step.id}'", step_id=step.id)
            seen.add(step.id)

        if plan.plan_type.requires_condition:
            if not plan.condition_prompt or not plan.condition_prompt.strip():
                return PlanInvalidError(f"{plan.plan_type.value} plans require a condition prompt")

        return None

    def detect_cycle(self, plan: Plan) -> bool:
        """Return True if any step reaches itself through its dependencies."""
        return self.find_cycle(plan) is not None

    def find_cycle(self, plan: Plan) -> Optional[List[str]]:
        """Return the first cyclic path found, e.g. ``["a", "b", "a"]``."""
        index: Dict[str, Step] = {step.id: step for step in plan.steps}
        done: Set[str] = set()
        for step in plan.steps:
            if step.id in done:
                continue
            path = self._walk(index, step.id, done)
            if path is not None:
                return path
        return None

    @staticmethod
    def _walk(index: Dict[str, Step], start: str, done: Set[str]) -> Optional[List[str]]:
        # Explicit-stack DFS. Only ids on the active path form a cycle;
        # ids in ``done`` have a cycle-free closure.
        path = [start]
        on_path = {start}
        stack: List[Iterator[str]] = [iter(index[start].dependencies)]

        while stack:
            dep_id = next(stack[-1], None)
            if dep_id is None:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if dep_id in on_path:
                return path[path.index(dep_id):] + [dep_id]
            if dep_id in done or dep_id not in index:
                continue
            path.append(dep_id)
            on_path.add(dep_id)
            stack.append(iter(index[dep_id].dependencies))

        return None

    def check(self, plan: Plan) -> None:
        """Raise if the plan cannot be executed.

        Raises:
            PlanInvalidError: On a structural problem.
            CycleDetectedError: On a circular dependency chain.
        """
        error = self.validate(plan)
        if error is not None:
            raise error

        cycle = self.find_cycle(plan)
        if cycle is not None:
            logger.warning(f"Cycle detected in plan: {' -> '.join(cycle)}")
            raise CycleDetectedError(cycle)
