"""
Plan execution engine.

Validates a plan, then runs it with the strategy for its topology:

- SEQUENTIAL: declaration order, fail fast
- PARALLEL: independent steps concurrently, then dependent steps in order
- CHAINED: sequential with the previous output piped into ``input``
- CONDITIONAL: runs as SEQUENTIAL
- COMPETITIVE: every step concurrently, first success in declaration order wins
- ITERATIVE: the whole step list repeated until the planner says stop

Each call to ``execute`` gets its own ``ResultsTable``.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, Optional, Sequence

from multitool.config.defaults import (
    ENGINE_CHAIN_INPUT_KEY,
    ENGINE_MAX_ITERATIONS,
    ENGINE_MAX_WORKERS,
    ENGINE_THREAD_PREFIX,
)
from multitool.engine_config import EngineConfig
from multitool.errors import (
    CycleDetectedError,
    DependencyUnsatisfiedError,
    PlanInvalidError,
    PlannerError,
)
from multitool.execution.aggregator import ResultAggregator
from multitool.execution.resolver import ResultLookup, VariableResolver, references
from multitool.execution.results import ResultsTable
from multitool.llm.planner import Planner
from multitool.llm.prompts import build_condition_prompt, should_stop
from multitool.plan.analyzer import DependencyAnalyzer
from multitool.plan.models import Plan, PlanType, Step, StepResult
from multitool.plan.plan_io import parse_plan
from multitool.tools.invoker import ToolInvoker
from multitool.tools.retry import RetryConfig, invoke_with_retry

logger = logging.getLogger(__name__)


class ExecutionEngine:
    """Runs plans against a tool invoker, with an optional planner.

    The worker pool used by PARALLEL and COMPETITIVE plans is created on
    first use and released by ``close()``.
    """

    def __init__(
        self,
        invoker: ToolInvoker,
        planner: Optional[Planner] = None,
        max_iterations: int = ENGINE_MAX_ITERATIONS,
        chain_input_key: str = ENGINE_CHAIN_INPUT_KEY,
        max_workers: Optional[int] = ENGINE_MAX_WORKERS,
        analyzer: Optional[DependencyAnalyzer] = None,
        resolver: Optional[VariableResolver] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.invoker = invoker
        self.planner = planner
        self.max_iterations = max_iterations
        self.chain_input_key = chain_input_key
        self.max_workers = max_workers
        self.analyzer = analyzer or DependencyAnalyzer()
        self.resolver = resolver or VariableResolver()
        self.retry_config = retry_config or RetryConfig()
        self.aggregator = ResultAggregator(planner)

        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

        self._strategies: Dict[PlanType, Callable[[Plan, ResultsTable], StepResult]] = {
            PlanType.SEQUENTIAL: self._execute_sequential,
            PlanType.PARALLEL: self._execute_parallel,
            PlanType.CHAINED: self._execute_chained,
            PlanType.CONDITIONAL: self._execute_conditional,
            PlanType.COMPETITIVE: self._execute_competitive,
            PlanType.ITERATIVE: self._execute_iterative,
        }

    @classmethod
    def from_config(
        cls,
        invoker: ToolInvoker,
        planner: Optional[Planner] = None,
        config: Optional[EngineConfig] = None,
    ) -> "ExecutionEngine":
        config = config or EngineConfig()
        return cls(
            invoker,
            planner=planner,
            max_iterations=config.max_iterations,
            chain_input_key=config.chain_input_key,
            max_workers=config.max_workers,
            retry_config=RetryConfig(
                max_attempts=config.tool_max_attempts,
                backoff_unit=config.tool_backoff_unit,
            ),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(self, plan: Plan) -> StepResult:
        """Validate and run ``plan``, returning the final result.

        Structural problems, tool failures and planner errors come back as a
        failed ``StepResult``. Nothing is invoked for an invalid or cyclic plan.
        """
        try:
            self.analyzer.check(plan)
        except PlanInvalidError as e:
            logger.warning(f"Rejected plan: {e.reason}")
            return StepResult.fail(f"Invalid plan: {e.reason}", error=e)
        except CycleDetectedError as e:
            logger.warning(f"Rejected plan: {e}")
            return StepResult.fail("Plan has circular dependencies", error=e)

        logger.info(f"Executing {plan}")
        table = ResultsTable()
        strategy = self._strategies[plan.plan_type]

        try:
            result = strategy(plan, table)
        except PlannerError as e:
            logger.error(f"Planner failed during {plan.plan_type.value} execution: {e}")
            return StepResult.fail(f"Execution failed: {e}", error=e)

        status = "succeeded" if result.success else f"failed: {result.message}"
        logger.info(f"{plan.plan_type.value} plan {status} ({len(table)} results recorded)")
        return result

    def execute_text(self, text: str) -> StepResult:
        """Parse a plan document and execute it.

        Unparseable text becomes an empty plan and fails validation.
        """
        return self.execute(parse_plan(text))

    def close(self) -> None:
        """Shut down the worker pool. Safe to call more than once."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            logger.debug("Shutting down step worker pool")
            executor.shutdown(wait=True)

    def __enter__(self) -> "ExecutionEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Step primitives
    # ------------------------------------------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=ENGINE_THREAD_PREFIX,
                )
            return self._executor

    def _run_step(
        self,
        step: Step,
        table: ResultsTable,
        key: Optional[str] = None,
        lookup: Optional[ResultLookup] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> StepResult:
        params = self.resolver.resolve(step, lookup if lookup is not None else table)
        if extra:
            params.update(extra)

        logger.debug(f"Step {step.id}: invoking {step.capability}")
        result = invoke_with_retry(
            lambda: self.invoker.invoke(step.server_id, step.tool_name, params),
            config=self.retry_config,
            label=step.capability,
        )
        table.record(key or step.id, result)

        if result.success:
            logger.debug(f"Step {step.id} succeeded")
        else:
            logger.warning(f"Step {step.id} failed: {result.message}")
        return result

    @staticmethod
    def _check_dependencies(step: Step, table: ResultsTable) -> None:
        missing = [dep for dep in step.dependencies if not table.succeeded(dep)]
        if missing:
            raise DependencyUnsatisfiedError(step.id, missing)

    def _chain_input(self, step: Step, previous: Step, previous_result: StepResult) -> Optional[Dict[str, Any]]:
        if self.chain_input_key in step.parameters:
            return None
        if any(references(value, previous.id) for value in step.parameters.values()):
            return None
        return {self.chain_input_key: previous_result.content}

    def _run_in_order(self, steps: Sequence[Step], table: ResultsTable, chained: bool = False) -> Optional[StepResult]:
        """Run ``steps`` one after another. Returns the first failure, or ``None``."""
        previous: Optional[Step] = None
        previous_result: Optional[StepResult] = None

        for step in steps:
            try:
                self._check_dependencies(step, table)
            except DependencyUnsatisfiedError as e:
                logger.warning(f"{e} (missing or failed: {', '.join(e.missing)})")
                return StepResult.fail(str(e), error=e)

            extra = None
            if chained and previous is not None and previous_result is not None:
                extra = self._chain_input(step, previous, previous_result)

            result = self._run_step(step, table, extra=extra)
            if not result.success:
                return result
            previous, previous_result = step, result

        return None

    def _aggregate(self, plan: Plan, table: ResultsTable) -> StepResult:
        results = table.in_order(step.id for step in plan.steps)
        return self.aggregator.aggregate(results, plan.aggregation_prompt)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _execute_sequential(self, plan: Plan, table: ResultsTable) -> StepResult:
        failure = self._run_in_order(plan.steps, table)
        if failure is not None:
            return failure
        return self._aggregate(plan, table)

    def _execute_chained(self, plan: Plan, table: ResultsTable) -> StepResult:
        failure = self._run_in_order(plan.steps, table, chained=True)
        if failure is not None:
            return failure
        return self._aggregate(plan, table)

    def _execute_conditional(self, plan: Plan, table: ResultsTable) -> StepResult:
        logger.warning("CONDITIONAL plans have no branching yet; running steps sequentially")
        return self._execute_sequential(plan, table)

    def _execute_parallel(self, plan: Plan, table: ResultsTable) -> StepResult:
        independent = plan.independent_steps()
        dependent = plan.dependent_steps()
        logger.debug(f"Parallel batch of {len(independent)} steps, {len(dependent)} dependent")

        if independent:
            executor = self._get_executor()
            futures = {executor.submit(self._run_step, step, table): step for step in independent}
            wait(futures)
            for future, step in futures.items():
                exc = future.exception()
                if exc is not None:
                    logger.error(f"Step {step.id} raised during parallel execution: {exc}")
                    table.record(step.id, StepResult.fail(f"Parallel execution failed: {exc}", error=exc))

        failure = self._run_in_order(dependent, table)
        if failure is not None:
            return failure
        return self._aggregate(plan, table)

    def _execute_competitive(self, plan: Plan, table: ResultsTable) -> StepResult:
        executor = self._get_executor()
        futures = [(step, executor.submit(self._run_step, step, table)) for step in plan.steps]
        wait([future for _, future in futures])

        for step, future in futures:
            exc = future.exception()
            if exc is not None:
                logger.error(f"Step {step.id} raised during competitive execution: {exc}")
                continue
            result = future.result()
            if result.success:
                logger.info(f"Competitive winner: step {step.id}")
                return result

        return StepResult.fail("All competitive executions failed")

    def _execute_iterative(self, plan: Plan, table: ResultsTable) -> StepResult:
        condition = plan.condition_prompt if plan.condition_prompt and plan.condition_prompt.strip() else None
        if condition and self.planner is None:
            logger.warning(
                f"No planner configured; ITERATIVE plan will run all {self.max_iterations} iterations"
            )

        latest: Dict[str, StepResult] = {}
        last: Optional[StepResult] = None

        for iteration in range(1, self.max_iterations + 1):
            logger.debug(f"Iteration {iteration}/{self.max_iterations}")
            for step in plan.steps:
                last = self._run_step(step, table, key=f"{step.id}_iter{iteration}", lookup=latest)
                latest[step.id] = last
                if not last.success:
                    return last

            if condition and self.planner is not None and last is not None:
                answer = self.planner.ask(build_condition_prompt(condition, last))
                if should_stop(answer):
                    logger.info(f"Iteration stopped by planner after {iteration} iteration(s)")
                    break

        if last is None:
            return StepResult.fail("Iterative execution produced no results")
        return last
