"""Provider registry for resolving provider names to instances.

Supports both builtin provider names ("openai", "anthropic") and custom
dotted-path imports (e.g. "my.module.MyProvider").
"""

from __future__ import annotations

import importlib
import os
from typing import TYPE_CHECKING

from agenteval.adapters.base import BaseProvider
from agenteval.errors import ConfigurationError

if TYPE_CHECKING:
    from agenteval.models.config import ProviderConfig, RunConfig

# Builtin providers are lazily imported; the provider SDK must be installed.
BUILTIN_PROVIDERS: dict[str, str] = {
    "openai": "agenteval.adapters.openai_adapter.OpenAIProvider",
    "anthropic": "agenteval.adapters.anthropic_adapter.AnthropicProvider",
}

_INSTALL_HINTS: dict[str, str] = {
    "openai": "pip install agenteval[openai]",
    "anthropic": "pip install agenteval[anthropic]",
}

API_KEY_ENV_VARS: dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def get_provider(name: str, config: ProviderConfig | None = None) -> BaseProvider:
    """Resolve a provider by name or dotted path and return an instance.

    Args:
        name: A builtin provider name or a fully-qualified dotted path
              to a BaseProvider subclass.
        config: Credentials and endpoint, passed to the constructor
              when given.

    Raises:
        ConfigurationError: If the name is unknown or does not resolve
            to a BaseProvider subclass.
        ImportError: If the module cannot be imported (e.g. missing SDK).
    """
    if name in BUILTIN_PROVIDERS:
        dotted_path = BUILTIN_PROVIDERS[name]
    elif "." in name:
        dotted_path = name
    else:
        available = ", ".join(sorted(BUILTIN_PROVIDERS))
        raise ConfigurationError(
            f"Unknown provider '{name}'. "
            f"Available builtin providers: {available}. "
            f"For custom providers, provide the full dotted path "
            f"(e.g., 'my.module.MyProvider')."
        )

    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path or not class_name:
        raise ConfigurationError(
            f"Invalid provider path '{dotted_path}'. Expected format: 'module.path.ClassName'."
        )

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        if name in _INSTALL_HINTS:
            raise ImportError(
                f"Provider '{name}' requires the {name} package. "
                f"Install it: {_INSTALL_HINTS[name]}"
            ) from exc
        raise

    cls = getattr(module, class_name, None)
    if cls is None:
        raise ConfigurationError(f"Module '{module_path}' has no attribute '{class_name}'.")
    if not isinstance(cls, type) or not issubclass(cls, BaseProvider):
        raise ConfigurationError(
            f"'{dotted_path}' is not a subclass of BaseProvider. "
            f"Custom providers must inherit from agenteval.adapters.base.BaseProvider."
        )

    if config is None:
        return cls()
    return cls(config)


def create_providers_from_config(config: RunConfig) -> dict[str, BaseProvider]:
    """Build a provider for every builtin whose API key is available.

    Keys come from the run config first, then the environment.
    """
    from agenteval.models.config import ProviderConfig

    providers: dict[str, BaseProvider] = {}
    for name, env_var in API_KEY_ENV_VARS.items():
        configured = getattr(config.providers, name) or ProviderConfig()
        api_key = configured.api_key or os.environ.get(env_var)
        if not api_key:
            continue
        providers[name] = get_provider(
            name, ProviderConfig(api_key=api_key, base_url=configured.base_url)
        )
    return providers
