"""agenteval - a test runner for evaluating conversational AI agents.

Declare suites with ``describe``, register tasks with ``@suite.eval``,
and assert on model responses with ``ctx.expect(result)``.
"""

__version__ = "0.1.0"

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, Message, ToolCall
from agenteval.errors import (
    AgentEvalError,
    ConfigurationError,
    ExpectationError,
    TaskTimeoutError,
)
from agenteval.execution.context import EvalContext
from agenteval.execution.runner import RunnerHooks, run_suites
from agenteval.expect import (
    Expect,
    JudgeOptions,
    anything,
    array_containing,
    object_containing,
    string_matching,
)
from agenteval.graders import define_grader
from agenteval.models.result import GraderResult, RunResult, TaskStatus, TokenUsage
from agenteval.models.suite import AIConfig, Suite
from agenteval.providers import anthropic, openai
from agenteval.registry import describe
from agenteval.tools import MockExecutor, SpyExecutor, ToolParameter, define_tool

__all__ = [
    "AIConfig",
    "AgentEvalError",
    "BaseProvider",
    "ChatRequest",
    "ChatResult",
    "ConfigurationError",
    "EvalContext",
    "Expect",
    "ExpectationError",
    "GraderResult",
    "JudgeOptions",
    "Message",
    "MockExecutor",
    "RunResult",
    "RunnerHooks",
    "SpyExecutor",
    "Suite",
    "TaskStatus",
    "TaskTimeoutError",
    "TokenUsage",
    "ToolCall",
    "ToolParameter",
    "__version__",
    "anthropic",
    "anything",
    "array_containing",
    "define_grader",
    "define_tool",
    "describe",
    "object_containing",
    "openai",
    "run_suites",
    "string_matching",
]
