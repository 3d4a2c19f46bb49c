"""Tests for agenteval.execution.context - AI resolution, history and tools."""

from __future__ import annotations

import pytest

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, Message
from agenteval.errors import ConfigurationError, ExpectationError
from agenteval.execution.context import create_eval_context, resolve_judge
from agenteval.models.config import RunConfig
from agenteval.models.result import GraderResult
from agenteval.models.suite import AIConfig, SuiteOptions, TaskOptions
from agenteval.tools import define_tool


class EchoProvider(BaseProvider):
    """Echoes the last user message and records every request."""

    def __init__(self) -> None:
        self.requests: list[ChatRequest] = []

    async def chat(self, request: ChatRequest) -> ChatResult:
        self.requests.append(request)
        return ChatResult(content=f"echo: {request.messages[-1].content}")


SUITE_AI = AIConfig(provider="anthropic", model="suite-model")
TASK_AI = AIConfig(provider="openai", model="task-model")


def _context(providers, suite_options=None, task_options=None, config=None, results=None):
    return create_eval_context(
        providers,
        config or RunConfig(),
        suite_options or SuiteOptions(ai=SUITE_AI),
        task_options or TaskOptions(),
        results if results is not None else [],
    )


class TestAIResolution:
    @pytest.mark.asyncio
    async def test_task_ai_overrides_suite(self):
        anthropic, openai = EchoProvider(), EchoProvider()
        ctx = _context({"anthropic": anthropic, "openai": openai}, task_options=TaskOptions(ai=TASK_AI))
        await ctx.ai.prompt("hi")
        assert openai.requests[0].model == "task-model"
        assert anthropic.requests == []

    def test_missing_ai_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="No AI configuration"):
            _context({"anthropic": EchoProvider()}, suite_options=SuiteOptions())

    def test_unconfigured_provider_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match='Provider "anthropic" not configured'):
            _context({})


class TestJudgeResolution:
    def test_precedence(self):
        suite_judge = AIConfig(provider="anthropic", model="suite-judge")
        task_judge = AIConfig(provider="openai", model="task-judge")
        run_config = RunConfig.model_validate({"judge": {"provider": "openai", "model": "run-judge"}})

        assert resolve_judge(
            run_config, SuiteOptions(judge=suite_judge), TaskOptions(judge=task_judge), SUITE_AI
        ) == task_judge
        assert resolve_judge(run_config, SuiteOptions(judge=suite_judge), TaskOptions(), SUITE_AI) == suite_judge
        assert resolve_judge(run_config, SuiteOptions(), TaskOptions(), SUITE_AI).model == "run-judge"
        assert resolve_judge(RunConfig(), SuiteOptions(), TaskOptions(), SUITE_AI) == SUITE_AI

    @pytest.mark.asyncio
    async def test_judge_defaults_to_model_under_test(self):
        provider = EchoProvider()
        results: list[GraderResult] = []
        ctx = _context({"anthropic": provider}, results=results)
        provider_reply = ChatResult(content="x")

        # The echo reply is not JSON, so the judgment fails to parse
        with pytest.raises(ExpectationError):
            await ctx.expect(provider_reply).to_pass_judge("anything")
        assert provider.requests[0].model == "suite-model"
        assert results[0].score == 0.0

    @pytest.mark.asyncio
    async def test_unconfigured_judge_fails_only_when_used(self):
        suite_options = SuiteOptions(ai=SUITE_AI, judge=AIConfig(provider="openai", model="j"))
        ctx = _context({"anthropic": EchoProvider()}, suite_options=suite_options)
        ctx.expect(ChatResult(content="fine")).to_contain("fine")
        with pytest.raises(ConfigurationError):
            await ctx.expect(ChatResult(content="fine")).to_pass_judge("c")


class TestConversationHistory:
    @pytest.mark.asyncio
    async def test_history_accumulates_within_context(self):
        provider = EchoProvider()
        ctx = _context({"anthropic": provider}, suite_options=SuiteOptions(ai=SUITE_AI, system="Be brief."))

        await ctx.ai.prompt("My favorite color is blue.")
        await ctx.ai.chat([{"role": "user", "content": "What is my favorite color?"}])

        second = provider.requests[1]
        assert second.system == "Be brief."
        assert [m.role for m in second.messages] == ["user", "assistant", "user"]
        assert second.messages[1].content == "echo: My favorite color is blue."
        assert len(provider.requests[0].messages) == 1

    @pytest.mark.asyncio
    async def test_history_is_not_shared_between_contexts(self):
        provider = EchoProvider()
        first = _context({"anthropic": provider})
        second = _context({"anthropic": provider})
        await first.ai.prompt("one")
        await second.ai.chat([Message(role="user", content="two")])
        assert len(provider.requests[1].messages) == 1


class TestTools:
    @pytest.mark.asyncio
    async def test_suite_and_task_tools_merged(self):
        provider = EchoProvider()
        suite_tool = define_tool("search")
        task_tool = define_tool("lookup")
        ctx = _context(
            {"anthropic": provider},
            suite_options=SuiteOptions(ai=SUITE_AI, tools=[suite_tool]),
            task_options=TaskOptions(tools={"getWeather": task_tool}),
        )
        await ctx.ai.prompt("hi")
        assert [t.name for t in provider.requests[0].tools] == ["search", "getWeather"]

    @pytest.mark.asyncio
    async def test_no_tools_sends_none(self):
        provider = EchoProvider()
        await _context({"anthropic": provider}).ai.prompt("hi")
        assert provider.requests[0].tools is None
