"""Anthropic provider.

Converts ChatRequest messages and tool definitions to the messages API
format. The system prompt is sent as the separate ``system`` parameter.
Tool calls are run in a loop like the OpenAI provider.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, ToolCall
from agenteval.models.result import TokenUsage
from agenteval.tools import ToolDefinition, execute_tool_call, tool_parameters_schema

if TYPE_CHECKING:
    from agenteval.models.config import ProviderConfig

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.0
MAX_STEPS = 5


class AnthropicProvider(BaseProvider):
    """Provider for the Anthropic messages API.

    Uses a lazy-initialized AsyncAnthropic client. Without an explicit
    API key the SDK reads ANTHROPIC_API_KEY from the environment.
    """

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = config
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncAnthropic client."""
        if self._client is None:
            from anthropic import AsyncAnthropic

            kwargs: dict[str, Any] = {}
            if self._config is not None:
                if self._config.api_key:
                    kwargs["api_key"] = self._config.api_key
                if self._config.base_url is not None:
                    kwargs["base_url"] = str(self._config.base_url)
            self._client = AsyncAnthropic(**kwargs)
        return self._client

    def _convert_messages(self, request: ChatRequest) -> list[dict[str, Any]]:
        """Convert messages, dropping system turns (sent separately)."""
        return [
            {"role": msg.role, "content": msg.content}
            for msg in request.messages
            if msg.role != "system"
        ]

    @staticmethod
    def _system_prompt(request: ChatRequest) -> str | None:
        parts = [request.system] if request.system else []
        parts.extend(msg.content for msg in request.messages if msg.role == "system")
        return "\n\n".join(parts) if parts else None

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert tool definitions to Anthropic format (``input_schema``)."""
        return [
            {
                "name": tool.name,
                "description": tool.description or "",
                "input_schema": tool_parameters_schema(tool),
            }
            for tool in tools
        ]

    @staticmethod
    def _extract_usage(response: Any) -> TokenUsage:
        usage = getattr(response, "usage", None)
        if usage is None:
            return TokenUsage()
        input_tokens = usage.input_tokens or 0
        output_tokens = usage.output_tokens or 0
        return TokenUsage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )

    async def chat(self, request: ChatRequest) -> ChatResult:
        """Send the conversation to Anthropic, running tools the model calls."""
        client = self._get_client()
        messages = self._convert_messages(request)
        tools_by_name = {tool.name: tool for tool in request.tools or []}

        kwargs: dict[str, Any] = {
            "model": request.model or DEFAULT_MODEL,
            "max_tokens": request.max_tokens if request.max_tokens is not None else DEFAULT_MAX_TOKENS,
            "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
        }
        system = self._system_prompt(request)
        if system is not None:
            kwargs["system"] = system
        if tools_by_name:
            kwargs["tools"] = self._convert_tools(list(tools_by_name.values()))

        tool_calls: list[ToolCall] = []
        usage = TokenUsage()
        content = ""

        for _ in range(MAX_STEPS):
            response = await client.messages.create(messages=messages, **kwargs)
            usage = usage + self._extract_usage(response)

            text_parts: list[str] = []
            tool_uses: list[Any] = []
            for block in response.content:
                if block.type == "text":
                    text_parts.append(block.text)
                elif block.type == "tool_use":
                    tool_uses.append(block)
            content = "\n".join(text_parts)

            if not tools_by_name or not tool_uses:
                break

            messages.append({"role": "assistant", "content": response.content})
            tool_results: list[dict[str, Any]] = []
            for block in tool_uses:
                # block.input is already a dict
                call, output = await execute_tool_call(
                    tools_by_name.get(block.name), block.name, dict(block.input)
                )
                tool_calls.append(call)
                tool_results.append(
                    {
                        "type": "tool_result",
                        "tool_use_id": block.id,
                        "content": json.dumps(output, default=str),
                    }
                )
            messages.append({"role": "user", "content": tool_results})

        return ChatResult(content=content, tool_calls=tool_calls, usage=usage)

    def provider_name(self) -> str:
        return "anthropic"
