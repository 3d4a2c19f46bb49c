"""Per-trial eval context: the ``ai`` client and the ``expect`` factory.

Each trial gets a fresh context with its own conversation history and
its own grader-result list, so nothing leaks between trials or tasks.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, Message
from agenteval.adapters.registry import get_provider
from agenteval.errors import ConfigurationError
from agenteval.expect.expect import Expect
from agenteval.models.config import ProviderConfig, RunConfig
from agenteval.models.result import GraderResult
from agenteval.models.suite import AIConfig, SuiteOptions, TaskOptions
from agenteval.tools import ToolDefinition


class AIClient:
    """Conversation-aware wrapper around one provider.

    Every ``chat`` call appends the new messages to the history, sends
    the whole history (plus the system prompt and tools), then appends
    the assistant reply before returning.
    """

    def __init__(
        self,
        provider: BaseProvider,
        model: str,
        system: str | None = None,
        tools: list[ToolDefinition] | None = None,
    ) -> None:
        self._provider = provider
        self._model = model
        self._system = system
        self._tools = list(tools or [])
        self.history: list[Message] = []

    async def chat(self, messages: Sequence[Message | Mapping[str, Any]]) -> ChatResult:
        for msg in messages:
            if isinstance(msg, Message):
                self.history.append(msg)
            else:
                self.history.append(Message(role=msg["role"], content=msg["content"]))

        result = await self._provider.chat(
            ChatRequest(
                model=self._model,
                system=self._system,
                messages=list(self.history),
                tools=self._tools or None,
            )
        )

        self.history.append(Message(role="assistant", content=result.content))
        return result

    async def prompt(self, text: str) -> ChatResult:
        """Send a single user message."""
        return await self.chat([Message(role="user", content=text)])


class EvalContext:
    """What a task body receives: ``ctx.ai`` and ``ctx.expect(result)``."""

    def __init__(
        self,
        ai: AIClient,
        grader_results: list[GraderResult],
        judge_provider: BaseProvider | None,
        judge_config: AIConfig | None,
        providers: Mapping[str, BaseProvider],
        run_config: RunConfig,
    ) -> None:
        self.ai = ai
        self.grader_results = grader_results
        self._judge_provider = judge_provider
        self._judge_config = judge_config
        self._providers = providers
        self._run_config = run_config

    def expect(self, result: ChatResult) -> Expect:
        return Expect(
            result,
            self.grader_results,
            judge_provider=self._judge_provider,
            judge_config=self._judge_config,
            provider_resolver=lambda ai: resolve_provider(self._providers, ai, self._run_config),
        )


def resolve_provider(
    providers: Mapping[str, BaseProvider], ai: AIConfig, run_config: RunConfig
) -> BaseProvider:
    """Return the provider instance for an AI configuration.

    An ``api_key`` on the config builds a dedicated provider; dotted
    paths are imported; builtin names must already be configured.

    Raises:
        ConfigurationError: If a builtin provider has no API key.
    """
    if ai.api_key:
        configured = getattr(run_config.providers, ai.provider, None)
        base_url = configured.base_url if configured is not None else None
        return get_provider(ai.provider, ProviderConfig(api_key=ai.api_key, base_url=base_url))

    provider = providers.get(ai.provider)
    if provider is not None:
        return provider
    if "." in ai.provider:
        return get_provider(ai.provider)
    raise ConfigurationError(
        f'Provider "{ai.provider}" not configured. Add API key to config or environment.'
    )


def resolve_judge(
    run_config: RunConfig, suite_options: SuiteOptions, task_options: TaskOptions, ai: AIConfig
) -> AIConfig:
    """Task judge, then suite judge, then run judge, then the AI under test."""
    if task_options.judge is not None:
        return task_options.judge
    if suite_options.judge is not None:
        return suite_options.judge
    if run_config.judge is not None:
        return run_config.judge.to_ai_config()
    return ai


def create_eval_context(
    providers: Mapping[str, BaseProvider],
    run_config: RunConfig,
    suite_options: SuiteOptions,
    task_options: TaskOptions,
    grader_results: list[GraderResult],
) -> EvalContext:
    """Build an isolated context for one trial.

    Raises:
        ConfigurationError: If neither the task nor the suite sets an AI
            configuration, or its provider is not configured.
    """
    ai = task_options.ai or suite_options.ai
    if ai is None:
        raise ConfigurationError(
            "No AI configuration. Set ai=... on the suite (describe) or the task (eval)."
        )
    provider = resolve_provider(providers, ai, run_config)

    judge = resolve_judge(run_config, suite_options, task_options, ai)
    if judge == ai:
        judge_provider: BaseProvider | None = provider
    elif judge.api_key or "." in judge.provider:
        judge_provider = resolve_provider(providers, judge, run_config)
    else:
        # Missing judge providers only fail when a judge assertion runs.
        judge_provider = providers.get(judge.provider)

    tools = [*suite_options.tools, *task_options.tool_list()]
    client = AIClient(provider, ai.model, system=suite_options.system, tools=tools)

    return EvalContext(
        ai=client,
        grader_results=grader_results,
        judge_provider=judge_provider,
        judge_config=judge,
        providers=providers,
        run_config=run_config,
    )
