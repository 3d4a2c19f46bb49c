"""agenteval adapters - provider abstraction layer.

Re-exports the BaseProvider ABC, the message/result dataclasses and the
provider registry. The builtin OpenAI and Anthropic providers are
resolved lazily through the registry since their SDKs are optional.
"""

from agenteval.adapters.base import (
    BaseProvider,
    ChatRequest,
    ChatResult,
    Message,
    ToolCall,
)
from agenteval.adapters.registry import create_providers_from_config, get_provider

__all__ = [
    "BaseProvider",
    "ChatRequest",
    "ChatResult",
    "Message",
    "ToolCall",
    "create_providers_from_config",
    "get_provider",
]
