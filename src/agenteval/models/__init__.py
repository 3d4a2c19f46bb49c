"""agenteval data models - re-exports all public model classes."""

from agenteval.models.config import JudgeConfig, ProviderConfig, RunConfig
from agenteval.models.result import (
    GraderResult,
    RunResult,
    RunSummary,
    SuiteResult,
    TaskResult,
    TaskStatus,
    TokenUsage,
    TrialResult,
)
from agenteval.models.suite import AIConfig, EvalTask, Suite, SuiteOptions, TaskOptions

__all__ = [
    "AIConfig",
    "EvalTask",
    "GraderResult",
    "JudgeConfig",
    "ProviderConfig",
    "RunConfig",
    "RunResult",
    "RunSummary",
    "Suite",
    "SuiteOptions",
    "SuiteResult",
    "TaskOptions",
    "TaskResult",
    "TaskStatus",
    "TokenUsage",
    "TrialResult",
]
