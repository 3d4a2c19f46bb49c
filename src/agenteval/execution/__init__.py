"""agenteval execution engine - context, cost budget, aggregation and runner."""

from agenteval.execution.aggregation import build_run_result, summarize, task_status
from agenteval.execution.context import AIClient, EvalContext, create_eval_context
from agenteval.execution.cost import CostTracker
from agenteval.execution.runner import RunnerHooks, SuiteRunner, run_suites

__all__ = [
    "AIClient",
    "CostTracker",
    "EvalContext",
    "RunnerHooks",
    "SuiteRunner",
    "build_run_result",
    "create_eval_context",
    "run_suites",
    "summarize",
    "task_status",
]
