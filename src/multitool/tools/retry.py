"""
Bounded retry for tool invocations.

Features:
- Fixed attempt count with linear backoff (unit * attempt)
- Only transport faults are retried; logical failures return immediately
- Non-transport exceptions become a failed result without retry
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from multitool.config.defaults import TOOL_BACKOFF_UNIT_SECONDS, TOOL_MAX_ATTEMPTS
from multitool.errors import ToolInvocationFault
from multitool.plan.models import StepResult

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = TOOL_MAX_ATTEMPTS
    backoff_unit: float = TOOL_BACKOFF_UNIT_SECONDS  # seconds
    retryable_exceptions: tuple = (
        ToolInvocationFault,
        httpx.TransportError,
        ConnectionError,
        TimeoutError,
    )


@dataclass
class RetryStats:
    """Statistics for retry attempts."""
    attempts: int = 0
    faults: int = 0
    total_delay: float = 0.0
    last_error: Optional[Exception] = None


def calculate_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Delay before the next attempt, after ``attempt`` (1-based) faulted.

    Formula: unit * attempt
    """
    return max(0.0, config.backoff_unit * attempt)


def is_retryable(error: Exception, config: RetryConfig) -> bool:
    """Check if error is a transport fault."""
    return isinstance(error, config.retryable_exceptions)


def invoke_with_retry(
    call: Callable[[], StepResult],
    config: Optional[RetryConfig] = None,
    label: str = "tool",
    sleep: Callable[[float], None] = time.sleep,
    stats: Optional[RetryStats] = None,
) -> StepResult:
    """
    Run ``call`` with bounded retry on transport faults.

    Args:
        call: Zero-argument callable performing one attempt
        config: Retry configuration
        label: Name used in log messages
        sleep: Sleep function (injectable for tests)
        stats: Optional stats object updated in place

    Returns:
        The call's StepResult, or a failure carrying the last fault
    """
    config = config or RetryConfig()
    stats = stats or RetryStats()
    attempts = max(1, config.max_attempts)

    for attempt in range(1, attempts + 1):
        stats.attempts = attempt
        try:
            result = call()
        except Exception as e:
            if not is_retryable(e, config):
                logger.error(f"{label} raised {type(e).__name__}: {e}")
                return StepResult.fail(f"Tool execution error: {e}", error=e)

            stats.faults += 1
            stats.last_error = e
            if attempt < attempts:
                delay = calculate_backoff(attempt, config)
                stats.total_delay += delay
                logger.warning(f"{label} attempt {attempt}/{attempts} faulted: {e}. Retrying in {delay:.1f}s")
                if delay > 0:
                    sleep(delay)
            continue

        if attempt > 1:
            logger.info(f"{label} succeeded after {attempt} attempts")
        return result

    logger.warning(f"{label} failed after {attempts} attempts: {stats.last_error}")
    return StepResult.fail(f"Failed after {attempts} attempts: {stats.last_error}", error=stats.last_error)
