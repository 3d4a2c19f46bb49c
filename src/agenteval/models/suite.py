"""Suite and task declaration models.

These encode the declaration surface consumed by the runner: a suite
groups tasks that share an AI configuration, judge, system prompt and
tools. They are dataclasses rather than pydantic models because they
carry task callables and tool executors.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from agenteval.execution.context import EvalContext
    from agenteval.tools import ToolDefinition

ProviderName = Literal["anthropic", "openai"]

EvalFn = Callable[["EvalContext"], Awaitable[None]]


@dataclass(frozen=True)
class AIConfig:
    """Which provider and model to talk to.

    ``provider`` is a builtin provider name or a dotted path to a
    BaseProvider subclass. ``api_key`` overrides the run-level key.
    """

    provider: str
    model: str
    api_key: str | None = None


@dataclass
class SuiteOptions:
    ai: AIConfig | None = None
    judge: AIConfig | None = None
    system: str | None = None
    tools: list[ToolDefinition] = field(default_factory=list)


@dataclass
class TaskOptions:
    """Per-task overrides. ``timeout`` is in milliseconds.

    ``tools`` may be a list or a name-keyed mapping; mapping keys
    rename the tool.
    """

    ai: AIConfig | None = None
    judge: AIConfig | None = None
    tools: list[ToolDefinition] | Mapping[str, ToolDefinition] = field(
        default_factory=list
    )
    timeout: int | None = None

    def tool_list(self) -> list[ToolDefinition]:
        if isinstance(self.tools, Mapping):
            return [tool.renamed(name) for name, tool in self.tools.items()]
        return list(self.tools)


@dataclass
class EvalTask:
    name: str
    fn: EvalFn
    options: TaskOptions = field(default_factory=TaskOptions)


@dataclass
class Suite:
    """A named group of tasks sharing configuration.

    Tasks are registered with the ``eval`` (alias ``test``) decorator::

        weather = describe("weather-agent", ai=anthropic("claude-sonnet-4-5"))

        @weather.eval("asks for weather")
        async def asks_for_weather(ctx):
            result = await ctx.ai.prompt("What is the weather in Tokyo?")
            ctx.expect(result).tool_calls.to_include("getWeather")
    """

    name: str
    options: SuiteOptions = field(default_factory=SuiteOptions)
    tasks: list[EvalTask] = field(default_factory=list)
    file: str = ""

    def eval(
        self,
        name: str,
        *,
        ai: AIConfig | None = None,
        judge: AIConfig | None = None,
        tools: list[ToolDefinition] | Mapping[str, ToolDefinition] | None = None,
        timeout: int | None = None,
    ) -> Callable[[EvalFn], EvalFn]:
        """Register the decorated coroutine function as a task of this suite."""
        options = TaskOptions(ai=ai, judge=judge, tools=tools or [], timeout=timeout)

        def decorator(fn: EvalFn) -> EvalFn:
            self.tasks.append(EvalTask(name=name, fn=fn, options=options))
            return fn

        return decorator

    test = eval
