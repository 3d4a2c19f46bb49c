"""Tool definitions, parameter schema conversion, and recording executors.

Tools are declared on suites or tasks and handed to providers
uninterpreted. Providers read ``name``/``description``/``parameters``
to advertise the tool and call ``execute`` (when present) to produce
the result fed back to the model.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from agenteval.adapters.base import ToolCall

ParameterType = Literal["string", "number", "boolean", "object", "array"]

ToolExecutor = Callable[[dict[str, Any]], Any]


@dataclass(frozen=True)
class ToolParameter:
    """A single named parameter of a tool."""

    name: str
    type: ParameterType
    description: str | None = None
    required: bool = False


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the model may call, with an optional executor."""

    name: str
    description: str | None = None
    parameters: list[ToolParameter] = field(default_factory=list)
    execute: ToolExecutor | None = None

    def renamed(self, name: str) -> ToolDefinition:
        return replace(self, name=name)


def define_tool(
    name: str,
    description: str | None = None,
    parameters: list[ToolParameter] | None = None,
    execute: ToolExecutor | None = None,
) -> ToolDefinition:
    """Define a tool for use in evals.

    Example::

        get_weather = define_tool(
            "getWeather",
            description="Get the current weather for a location",
            parameters=[ToolParameter("location", "string", required=True)],
            execute=lambda args: {"temp": 21, "location": args["location"]},
        )
    """
    return ToolDefinition(
        name=name,
        description=description,
        parameters=list(parameters or []),
        execute=execute,
    )


def tool_parameters_schema(tool: ToolDefinition) -> dict[str, Any]:
    """Convert a tool's parameter list to a JSON Schema object."""
    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in tool.parameters:
        prop: dict[str, Any] = {"type": param.type}
        if param.description:
            prop["description"] = param.description
        properties[param.name] = prop
        if param.required:
            required.append(param.name)
    return {"type": "object", "properties": properties, "required": required}


async def run_executor(executor: ToolExecutor, arguments: dict[str, Any]) -> Any:
    """Call a tool executor, awaiting the result if it is awaitable."""
    result = executor(arguments)
    if inspect.isawaitable(result):
        result = await result
    return result


class MockExecutor:
    """Executor that records calls and returns a fixed value.

    Useful for testing tool call behavior without real execution::

        lookup = MockExecutor({"success": True})
        tool = define_tool("lookup", execute=lookup)
        ...
        assert lookup.calls == [{"query": "hello"}]
    """

    def __init__(self, return_value: Any = None) -> None:
        self.return_value = return_value
        self.calls: list[dict[str, Any]] = []

    def __call__(self, arguments: dict[str, Any]) -> Any:
        self.calls.append(arguments)
        return self.return_value


class SpyExecutor:
    """Executor that wraps another executor and records calls and results.

    Async wrapped executors stay async: the spy returns an awaitable and
    records the result once it resolves.
    """

    def __init__(self, executor: ToolExecutor) -> None:
        self._executor = executor
        self.calls: list[dict[str, Any]] = []
        self.results: list[Any] = []

    def __call__(self, arguments: dict[str, Any]) -> Any:
        self.calls.append(arguments)
        result = self._executor(arguments)
        if inspect.isawaitable(result):
            return self._record_async(result)
        self.results.append(result)
        return result

    async def _record_async(self, pending: Awaitable[Any]) -> Any:
        result = await pending
        self.results.append(result)
        return result


# Returned to the model when a called tool has no executor.
NOT_EXECUTED_PLACEHOLDER: dict[str, Any] = {"executed": True}


async def execute_tool_call(
    tool: ToolDefinition | None, name: str, arguments: dict[str, Any]
) -> tuple[ToolCall, Any]:
    """Record one model-initiated tool call, running its executor if present.

    Returns:
        The recorded ToolCall and the value to send back to the model.
    """
    call = ToolCall(name=name, arguments=arguments)
    if tool is None or tool.execute is None:
        return call, NOT_EXECUTED_PLACEHOLDER
    call.result = await run_executor(tool.execute, arguments)
    call.executed = True
    return call, call.result
