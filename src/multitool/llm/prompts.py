from typing import Optional, Sequence

from multitool.config.defaults import ITERATION_STOP_KEYWORDS
from multitool.plan.models import StepResult


CONDITION_PROMPT_TEMPLATE = """{condition}

Last result: {last_result}

Should we continue? Answer 'continue' or 'stop'."""


def build_condition_prompt(condition: str, last_result: StepResult) -> str:
    return CONDITION_PROMPT_TEMPLATE.format(
        condition=condition,
        last_result=last_result.content if last_result.content is not None else "",
    )


def build_aggregation_prompt(directive: str, results: Sequence[StepResult]) -> str:
    lines = [directive, "", "Results to aggregate:"]
    for i, result in enumerate(results, start=1):
        if result.success:
            lines.append(f"Result {i}: {result.content}")
    return "\n".join(lines) + "\n"


def should_stop(answer: Optional[str], keywords: Sequence[str] = ITERATION_STOP_KEYWORDS) -> bool:
    """Keyword heuristic for the ITERATIVE continue/stop answer.

    Plain substring match, so "incomplete" also stops. Scoped to this one
    decision; it is not a general answer parser.
    """
    low = (answer or "").lower()
    return any(kw in low for kw in keywords)
