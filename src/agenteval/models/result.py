"""Result data models for agenteval run outputs.

These models encode the outward result contract consumed by reporters:
grader results, per-trial and per-task outcomes, suite aggregates, and
the final run summary. Python attributes are snake_case; JSON output
uses the camelCase names of the external contract.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsage(_CamelModel):
    """Token usage counts from a provider call or an aggregate of calls."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class GraderResult(_CamelModel):
    """Outcome of a single assertion, custom grader, or judge call."""

    passed: bool = Field(alias="pass")
    reason: str = Field(min_length=1)
    score: float | None = Field(default=None, ge=0.0, le=1.0)
    usage: TokenUsage | None = None
    cost_usd: float | None = None


class TaskStatus(str, Enum):
    """Status of a trial or a task."""

    passed = "passed"
    failed = "failed"
    skipped = "skipped"
    error = "error"


class TrialResult(_CamelModel):
    """Result of one execution attempt of a task body."""

    status: TaskStatus
    duration: int
    grader_results: list[GraderResult] = Field(default_factory=list)
    error: str | None = None
    usage: TokenUsage = Field(default_factory=TokenUsage)
    cost_usd: float = 0.0


class TaskResult(_CamelModel):
    """Aggregate of all trials of one task."""

    name: str
    status: TaskStatus
    trials: list[TrialResult]
    duration: int


class SuiteResult(_CamelModel):
    """Aggregate of all tasks in one suite."""

    name: str
    file: str
    tasks: list[TaskResult]
    duration: int


class RunSummary(_CamelModel):
    """Task counts by status. Errored tasks count as failed."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0


class RunResult(_CamelModel):
    """Complete result of a run across all suites.

    Designed for JSON serialization (by alias) and lossless round-trip
    deserialization.
    """

    success: bool
    suites: list[SuiteResult]
    summary: RunSummary
    usage: TokenUsage
    cost_usd: float
    duration: int
