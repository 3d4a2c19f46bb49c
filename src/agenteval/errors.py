"""Error taxonomy for agenteval.

Assertion failures, configuration problems and task timeouts are all
distinct types so the runner can map each one to its own trial status
and log event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agenteval.models.result import GraderResult


class AgentEvalError(Exception):
    """Base class for all agenteval errors."""


class ExpectationError(AgentEvalError):
    """Raised when an assertion produces a failing GraderResult.

    Attributes:
        grader_result: The failing result (already recorded on the trial).
        expectation_type: Tag naming the assertion, e.g. "toContain"
            or "toolCalls.toHaveArgs".
    """

    def __init__(self, grader_result: GraderResult, expectation_type: str) -> None:
        self.grader_result = grader_result
        self.expectation_type = expectation_type
        super().__init__(grader_result.reason)


class ConfigurationError(AgentEvalError):
    """Raised for setup problems: missing AI/judge config, unknown provider."""


class TaskTimeoutError(AgentEvalError):
    """Raised when a task body exceeds its timeout."""

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Task timed out after {timeout_ms}ms")
