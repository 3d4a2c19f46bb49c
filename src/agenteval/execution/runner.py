"""SuiteRunner: runs suites of tasks with trials, concurrency and a cost budget.

Each task runs ``trials`` times, sequentially, each trial with a fresh
context. Tasks within a suite run either one after another or in
batches of ``max_concurrency`` via asyncio.TaskGroup; each batch
completes before the next starts. One CostTracker is shared by every
trial of the run and is checked before each trial.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from agenteval.adapters.base import BaseProvider
from agenteval.errors import ConfigurationError, ExpectationError, TaskTimeoutError
from agenteval.execution.aggregation import build_run_result, grader_totals, task_status
from agenteval.execution.context import create_eval_context
from agenteval.execution.cost import CostTracker
from agenteval.models.config import RunConfig
from agenteval.models.result import (
    GraderResult,
    RunResult,
    SuiteResult,
    TaskResult,
    TaskStatus,
    TrialResult,
)
from agenteval.models.suite import EvalTask, Suite

logger = structlog.get_logger(__name__)

COST_LIMIT_REASON = "Cost limit exceeded"


@dataclass
class RunnerHooks:
    """Optional lifecycle callbacks, e.g. for live console output.

    A hook that raises is logged as ``hook.error`` and the run continues.
    """

    on_suite_start: Callable[[Suite], None] | None = None
    on_suite_end: Callable[[Suite, SuiteResult], None] | None = None
    on_task_start: Callable[[EvalTask, Suite], None] | None = None
    on_task_end: Callable[[EvalTask, Suite, TaskResult], None] | None = None


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class SuiteRunner:
    """Executes suites against a set of configured providers.

    Args:
        providers: Provider instances keyed by provider name.
        config: Run configuration (trials, timeout, concurrency, budget).
        hooks: Lifecycle callbacks.
    """

    def __init__(
        self,
        providers: Mapping[str, BaseProvider],
        config: RunConfig,
        hooks: RunnerHooks | None = None,
    ) -> None:
        self._providers = providers
        self._config = config
        self._hooks = hooks or RunnerHooks()
        self._cost = CostTracker(config.max_cost)

    @property
    def cost_tracker(self) -> CostTracker:
        return self._cost

    def _fire(self, name: str, *args: Any) -> None:
        """Call a lifecycle hook. A raising hook is logged and does not stop the run."""
        hook = getattr(self._hooks, name)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception as exc:
            logger.error("hook.error", hook=name, error=str(exc), exc_type=type(exc).__name__)

    async def run(self, suites: Sequence[Suite]) -> RunResult:
        """Run every suite in order and aggregate the run result."""
        start = time.perf_counter()
        logger.info(
            "run.started",
            suites=len(suites),
            trials=self._config.trials,
            parallel=self._config.parallel,
            max_cost=self._config.max_cost,
        )

        suite_results = [await self.run_suite(suite) for suite in suites]

        result = build_run_result(suite_results, _elapsed_ms(start))
        logger.info(
            "run.completed",
            success=result.success,
            total=result.summary.total,
            passed=result.summary.passed,
            failed=result.summary.failed,
            skipped=result.summary.skipped,
            cost_usd=result.cost_usd,
            duration_ms=result.duration,
        )
        return result

    async def run_suite(self, suite: Suite) -> SuiteResult:
        start = time.perf_counter()
        self._fire("on_suite_start", suite)
        logger.info("suite.started", suite=suite.name, file=suite.file, tasks=len(suite.tasks))

        if self._config.parallel:
            task_results = await self._run_batched(suite)
        else:
            task_results = [await self.run_task(task, suite) for task in suite.tasks]

        result = SuiteResult(
            name=suite.name,
            file=suite.file,
            tasks=task_results,
            duration=_elapsed_ms(start),
        )
        logger.info("suite.completed", suite=suite.name, duration_ms=result.duration)
        self._fire("on_suite_end", suite, result)
        return result

    async def _run_batched(self, suite: Suite) -> list[TaskResult]:
        """Run tasks in fixed-size batches, waiting for each batch to finish."""
        size = self._config.max_concurrency
        results: list[TaskResult] = []
        for offset in range(0, len(suite.tasks), size):
            batch = suite.tasks[offset : offset + size]
            async with asyncio.TaskGroup() as tg:
                pending = [tg.create_task(self.run_task(task, suite)) for task in batch]
            results.extend(p.result() for p in pending)
        return results

    async def run_task(self, task: EvalTask, suite: Suite) -> TaskResult:
        start = time.perf_counter()
        self._fire("on_task_start", task, suite)
        logger.debug("task.started", suite=suite.name, task=task.name)

        trials = [await self.run_trial(task, suite, n) for n in range(1, self._config.trials + 1)]

        result = TaskResult(
            name=task.name,
            status=task_status(trials),
            trials=trials,
            duration=_elapsed_ms(start),
        )
        logger.info(
            "task.completed",
            suite=suite.name,
            task=task.name,
            status=result.status.value,
            duration_ms=result.duration,
        )
        self._fire("on_task_end", task, suite, result)
        return result

    async def run_trial(self, task: EvalTask, suite: Suite, trial_number: int = 1) -> TrialResult:
        """Run one trial of a task and classify its outcome.

        Assertion failures become ``failed``; configuration errors,
        timeouts and any other exception become ``error``. Nothing a
        task body raises propagates out of this method.
        """
        log = logger.bind(suite=suite.name, task=task.name, trial=trial_number)

        if self._cost.is_exceeded():
            log.warning("trial.skipped", reason=COST_LIMIT_REASON, total_cost=self._cost.total_cost)
            return TrialResult(status=TaskStatus.skipped, duration=0, error=COST_LIMIT_REASON)

        start = time.perf_counter()
        grader_results: list[GraderResult] = []
        status = TaskStatus.passed
        error: str | None = None

        try:
            await self._run_body(task, suite, grader_results)
            if any(not r.passed for r in grader_results):
                status = TaskStatus.failed
        except ExpectationError as exc:
            status = TaskStatus.failed
            error = exc.grader_result.reason
        except ConfigurationError as exc:
            status = TaskStatus.error
            error = f"Configuration error: {exc}"
            log.error("trial.configuration_error", error=str(exc))
        except TaskTimeoutError as exc:
            status = TaskStatus.error
            error = str(exc)
            log.warning("trial.timeout", timeout_ms=exc.timeout_ms)
        except Exception as exc:
            status = TaskStatus.error
            error = str(exc) or type(exc).__name__
            log.error("trial.error", error=error, exc_type=type(exc).__name__)

        usage, cost_usd = grader_totals(grader_results)
        self._cost.add(cost_usd)

        result = TrialResult(
            status=status,
            duration=_elapsed_ms(start),
            grader_results=grader_results,
            error=error,
            usage=usage,
            cost_usd=cost_usd,
        )
        log.debug(
            "trial.completed",
            status=status.value,
            graders=len(grader_results),
            cost_usd=cost_usd,
            duration_ms=result.duration,
        )
        return result

    async def _run_body(
        self, task: EvalTask, suite: Suite, grader_results: list[GraderResult]
    ) -> None:
        context = create_eval_context(
            self._providers, self._config, suite.options, task.options, grader_results
        )
        timeout_ms = task.options.timeout or self._config.timeout
        try:
            async with asyncio.timeout(timeout_ms / 1000) as deadline:
                await task.fn(context)
        except TimeoutError as exc:
            # Timeouts raised by the body itself keep their own message
            if deadline.expired():
                raise TaskTimeoutError(timeout_ms) from exc
            raise


async def run_suites(
    suites: Sequence[Suite],
    providers: Mapping[str, BaseProvider],
    config: RunConfig,
    hooks: RunnerHooks | None = None,
) -> RunResult:
    """Run suites with a fresh cost tracker and return the aggregated result."""
    return await SuiteRunner(providers, config, hooks).run(suites)
