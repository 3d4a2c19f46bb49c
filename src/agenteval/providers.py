"""Helpers for explicit AI configuration on suites and tasks."""

from __future__ import annotations

from agenteval.models.suite import AIConfig


def anthropic(model: str, api_key: str | None = None) -> AIConfig:
    """Configure Anthropic as the AI provider.

    Example::

        describe("my-agent", ai=anthropic("claude-sonnet-4-5"), system="You are helpful")
    """
    return AIConfig(provider="anthropic", model=model, api_key=api_key)


def openai(model: str, api_key: str | None = None) -> AIConfig:
    """Configure OpenAI as the AI provider."""
    return AIConfig(provider="openai", model=model, api_key=api_key)
