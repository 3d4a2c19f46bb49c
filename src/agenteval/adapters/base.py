"""BaseProvider ABC and unified message/result dataclasses.

All chat providers (OpenAI, Anthropic, mocks, spies) subclass
BaseProvider and implement chat(). The dataclasses here define the
universal types that flow between task code, providers, and the
assertion engine.

These are plain dataclasses (not Pydantic) to avoid overhead in the
hot path of provider calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from agenteval.models.result import TokenUsage

if TYPE_CHECKING:
    from agenteval.tools import ToolDefinition

MessageRole = Literal["user", "assistant", "system"]


@dataclass
class Message:
    """A single message in the conversation history."""

    role: MessageRole
    content: str


@dataclass
class ToolCall:
    """A tool invocation made by the model during one exchange.

    ``executed`` is True only when a tool executor ran; ``result`` then
    holds whatever it returned (which may itself be None).
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    result: Any = None
    executed: bool = False


@dataclass
class ChatRequest:
    """A single chat request sent to a provider.

    ``model`` may be None, in which case the provider uses its default.
    """

    model: str | None
    messages: list[Message]
    system: str | None = None
    tools: list[ToolDefinition] | None = None
    max_tokens: int | None = None
    temperature: float | None = None


@dataclass(frozen=True)
class ChatResult:
    """Response from a provider for one exchange.

    ``cost_usd`` is optional and only set by providers that report cost.
    """

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    usage: TokenUsage = field(default_factory=TokenUsage)
    cost_usd: float | None = None


class BaseProvider(ABC):
    """Abstract base class for all chat providers.

    Subclasses must implement chat() which takes a ChatRequest and
    returns a ChatResult.
    """

    @abstractmethod
    async def chat(self, request: ChatRequest) -> ChatResult:
        """Send the request's conversation to the model and return the result.

        Args:
            request: Model, system prompt, full message history, and tools.

        Returns:
            ChatResult with the model's reply, tool calls, and usage.
        """
        ...

    def provider_name(self) -> str:
        """Return the provider name for this provider.

        Default implementation returns the class name.
        Subclasses may override for custom naming.
        """
        return type(self).__name__
