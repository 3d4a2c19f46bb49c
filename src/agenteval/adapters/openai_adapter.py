"""OpenAI provider.

Converts ChatRequest messages and tool definitions to the chat
completions format and runs the tool loop: tool calls the model makes
are executed (when the tool has an executor) and their results are fed
back until the model answers without tools or the step limit is hit.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, ToolCall
from agenteval.models.result import TokenUsage
from agenteval.tools import ToolDefinition, execute_tool_call, tool_parameters_schema

if TYPE_CHECKING:
    from agenteval.models.config import ProviderConfig

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.0
MAX_STEPS = 5


class OpenAIProvider(BaseProvider):
    """Provider for the OpenAI chat completions API.

    Uses a lazy-initialized AsyncOpenAI client. Without an explicit
    API key the SDK reads OPENAI_API_KEY from the environment.
    """

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = config
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            kwargs: dict[str, Any] = {}
            if self._config is not None:
                if self._config.api_key:
                    kwargs["api_key"] = self._config.api_key
                if self._config.base_url is not None:
                    kwargs["base_url"] = str(self._config.base_url)
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    def _convert_messages(self, request: ChatRequest) -> list[dict[str, Any]]:
        result: list[dict[str, Any]] = []
        if request.system:
            result.append({"role": "system", "content": request.system})
        for msg in request.messages:
            result.append({"role": msg.role, "content": msg.content})
        return result

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert tool definitions to OpenAI function tool format."""
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description or "",
                    "parameters": tool_parameters_schema(tool),
                },
            }
            for tool in tools
        ]

    @staticmethod
    def _extract_usage(response: Any) -> TokenUsage:
        usage = getattr(response, "usage", None)
        if usage is None:
            return TokenUsage()
        input_tokens = usage.prompt_tokens or 0
        output_tokens = usage.completion_tokens or 0
        return TokenUsage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )

    async def chat(self, request: ChatRequest) -> ChatResult:
        """Send the conversation to OpenAI, running tools the model calls.

        Args:
            request: Model, system prompt, message history and tools.

        Returns:
            ChatResult with the final reply, every tool call made across
            all steps, and the summed usage.
        """
        client = self._get_client()
        messages = self._convert_messages(request)
        tools_by_name = {tool.name: tool for tool in request.tools or []}

        kwargs: dict[str, Any] = {
            "model": request.model or DEFAULT_MODEL,
            "max_tokens": request.max_tokens if request.max_tokens is not None else DEFAULT_MAX_TOKENS,
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
        }
        if tools_by_name:
            kwargs["tools"] = self._convert_tools(list(tools_by_name.values()))

        tool_calls: list[ToolCall] = []
        usage = TokenUsage()
        content = ""

        for _ in range(MAX_STEPS):
            response = await client.chat.completions.create(messages=messages, **kwargs)
            usage = usage + self._extract_usage(response)

            message = response.choices[0].message
            content = message.content or ""
            if not tools_by_name or not message.tool_calls:
                break

            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": tc.id,
                            "type": "function",
                            "function": {
                                "name": tc.function.name,
                                "arguments": tc.function.arguments,
                            },
                        }
                        for tc in message.tool_calls
                    ],
                }
            )
            for tc in message.tool_calls:
                arguments = json.loads(tc.function.arguments or "{}")
                call, output = await execute_tool_call(
                    tools_by_name.get(tc.function.name), tc.function.name, arguments
                )
                tool_calls.append(call)
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": tc.id,
                        "content": json.dumps(output, default=str),
                    }
                )

        return ChatResult(content=content, tool_calls=tool_calls, usage=usage)

    def provider_name(self) -> str:
        return "openai"
