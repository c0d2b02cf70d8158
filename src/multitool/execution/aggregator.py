"""Combines step outputs into the plan's final result."""

import logging
from typing import Optional, Sequence

from multitool.errors import AggregationEmptyError
from multitool.llm.planner import Planner
from multitool.llm.prompts import build_aggregation_prompt
from multitool.plan.models import StepResult

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Aggregates results, optionally through the planner.

    Results are expected in declaration order. Only successful results
    contribute content; failures are skipped.
    """

    def __init__(self, planner: Optional[Planner] = None):
        self.planner = planner

    def aggregate(self, results: Sequence[StepResult], directive: Optional[str] = None) -> StepResult:
        try:
            self._require_results(results)
        except AggregationEmptyError as e:
            return StepResult.fail(str(e), error=e)

        if len(results) == 1:
            return results[0]

        if directive and directive.strip():
            if self.planner is not None:
                prompt = build_aggregation_prompt(directive, results)
                logger.debug(f"Aggregating {len(results)} results via planner")
                return StepResult.ok(self.planner.ask(prompt))
            logger.warning("Aggregation directive given but no planner configured; concatenating results")

        if not any(result.success for result in results):
            logger.warning(f"All {len(results)} results failed; aggregate is empty")

        return StepResult.ok(self.combine(results))

    @staticmethod
    def combine(results: Sequence[StepResult]) -> str:
        """``"Result i: <content>"`` per success, joined by blank lines."""
        parts = [
            f"Result {i}: {result.content}"
            for i, result in enumerate(results, start=1)
            if result.success
        ]
        return "\n\n".join(parts)

    @staticmethod
    def _require_results(results: Sequence[StepResult]) -> None:
        if not results:
            raise AggregationEmptyError()
