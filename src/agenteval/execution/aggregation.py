"""Status and usage aggregation for trials, tasks and runs."""

from __future__ import annotations

from collections.abc import Sequence

from agenteval.models.result import (
    GraderResult,
    RunResult,
    RunSummary,
    SuiteResult,
    TaskStatus,
    TokenUsage,
    TrialResult,
)


def grader_totals(grader_results: Sequence[GraderResult]) -> tuple[TokenUsage, float]:
    """Sum usage and cost over the grader results that carry them (judge calls)."""
    usage = TokenUsage()
    cost_usd = 0.0
    for result in grader_results:
        if result.usage is not None:
            usage = usage + result.usage
        if result.cost_usd:
            cost_usd += result.cost_usd
    return usage, cost_usd


def task_status(trials: Sequence[TrialResult]) -> TaskStatus:
    """Aggregate trial statuses with pass@k semantics.

    All skipped -> skipped; any passed -> passed; any error -> error;
    otherwise failed.
    """
    if all(t.status == TaskStatus.skipped for t in trials):
        return TaskStatus.skipped
    if any(t.status == TaskStatus.passed for t in trials):
        return TaskStatus.passed
    if any(t.status == TaskStatus.error for t in trials):
        return TaskStatus.error
    return TaskStatus.failed


def summarize(suites: Sequence[SuiteResult]) -> RunSummary:
    """Count tasks by status. Errored tasks count as failed."""
    summary = RunSummary()
    for suite in suites:
        for task in suite.tasks:
            summary.total += 1
            if task.status == TaskStatus.passed:
                summary.passed += 1
            elif task.status in (TaskStatus.failed, TaskStatus.error):
                summary.failed += 1
            else:
                summary.skipped += 1
    return summary


def build_run_result(suites: Sequence[SuiteResult], duration: int) -> RunResult:
    summary = summarize(suites)
    usage = TokenUsage()
    cost_usd = 0.0
    for suite in suites:
        for task in suite.tasks:
            for trial in task.trials:
                usage = usage + trial.usage
                cost_usd += trial.cost_usd

    return RunResult(
        success=summary.failed == 0,
        suites=list(suites),
        summary=summary,
        usage=usage,
        cost_usd=cost_usd,
        duration=duration,
    )
