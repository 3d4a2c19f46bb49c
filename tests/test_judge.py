"""Tests for the LLM judge: reply parsing and Expect.to_pass_judge."""

from __future__ import annotations

import pytest

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult
from agenteval.errors import ConfigurationError, ExpectationError
from agenteval.expect.expect import Expect, JudgeOptions
from agenteval.expect.judge import (
    JUDGE_SYSTEM_PROMPT,
    build_judge_user_prompt,
    extract_json_object,
    parse_judgment,
)
from agenteval.models.result import GraderResult, TokenUsage
from agenteval.models.suite import AIConfig


class JudgeStub(BaseProvider):
    """Returns a fixed judge reply and records requests."""

    def __init__(self, reply: str, cost_usd: float | None = None) -> None:
        self.reply = reply
        self.cost_usd = cost_usd
        self.requests: list[ChatRequest] = []

    async def chat(self, request: ChatRequest) -> ChatResult:
        self.requests.append(request)
        return ChatResult(
            content=self.reply,
            usage=TokenUsage(input_tokens=50, output_tokens=10, total_tokens=60),
            cost_usd=self.cost_usd,
        )


class TestExtraction:
    def test_extracts_object_from_prose(self):
        text = 'Sure. {"pass": true, "score": 0.9, "reason": "good"} Hope that helps.'
        assert extract_json_object(text) == {"pass": True, "score": 0.9, "reason": "good"}

    def test_no_braces(self):
        assert extract_json_object("no json here") is None

    def test_invalid_json(self):
        assert extract_json_object("{not json}") is None

    def test_prompt_embeds_criteria_and_content(self):
        prompt = build_judge_user_prompt("Be polite", "Hello there")
        assert "## Criteria\nBe polite" in prompt
        assert "## AI Output to Evaluate\nHello there" in prompt


class TestParseJudgment:
    def test_valid(self):
        judgment = parse_judgment('{"pass": true, "score": 0.75, "reason": "fine"}')
        assert judgment.passed
        assert judgment.score == 0.75
        assert judgment.reason == "fine"

    def test_score_is_clamped(self):
        assert parse_judgment('{"score": 1.7}').score == 1.0
        assert parse_judgment('{"score": -2}').score == 0.0

    def test_malformed_never_raises(self):
        judgment = parse_judgment("I think it is great!")
        assert not judgment.passed
        assert judgment.score == 0.0
        assert judgment.reason == "Failed to parse judge response: I think it is great!"

    def test_missing_score_is_parse_failure(self):
        judgment = parse_judgment('{"pass": true, "reason": "ok"}')
        assert judgment.score == 0.0
        assert judgment.reason.startswith("Failed to parse judge response")

    def test_boolean_score_is_parse_failure(self):
        assert parse_judgment('{"score": true}').reason.startswith("Failed to parse")

    @pytest.mark.parametrize("raw_score", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_score_is_parse_failure(self, raw_score):
        judgment = parse_judgment(f'{{"pass": false, "score": {raw_score}, "reason": "garbage"}}')
        assert not judgment.passed
        assert judgment.score == 0.0
        assert judgment.reason.startswith("Failed to parse judge response")


class TestToPassJudge:
    @pytest.mark.asyncio
    async def test_nan_score_fails_assertion(self):
        judge = JudgeStub('{"pass": false, "score": NaN, "reason": "garbage"}')
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError):
            await Expect(ChatResult(content="answer"), results, judge_provider=judge).to_pass_judge(
                JudgeOptions(criteria="c", threshold=0.99)
            )
        assert not results[0].passed
        assert results[0].score == 0.0

    @pytest.mark.asyncio
    async def test_passes_at_threshold(self):
        judge = JudgeStub('{"pass": true, "score": 0.5, "reason": "adequate"}')
        results: list[GraderResult] = []
        await Expect(ChatResult(content="answer"), results, judge_provider=judge).to_pass_judge(
            "Answers the question"
        )
        assert results[0].passed
        assert results[0].score == 0.5
        assert results[0].reason == "Passed judge (score: 0.50). adequate"

    @pytest.mark.asyncio
    async def test_threshold_overrides_self_reported_pass(self):
        judge = JudgeStub('{"pass": true, "score": 0.6, "reason": "ok"}')
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError) as exc_info:
            await Expect(ChatResult(content="answer"), results, judge_provider=judge).to_pass_judge(
                JudgeOptions(criteria="Very thorough", threshold=0.8)
            )
        assert exc_info.value.expectation_type == "toPassJudge"
        assert not results[0].passed
        assert "threshold: 0.8" in results[0].reason

    @pytest.mark.asyncio
    async def test_mapping_options(self):
        judge = JudgeStub('{"pass": false, "score": 0.3, "reason": "meh"}')
        results: list[GraderResult] = []
        await Expect(ChatResult(content="x"), results, judge_provider=judge).to_pass_judge(
            {"criteria": "Anything goes", "threshold": 0.2}
        )
        assert results[0].passed

    @pytest.mark.asyncio
    async def test_malformed_reply_is_failing_result(self):
        judge = JudgeStub("Looks fine to me")
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError):
            await Expect(ChatResult(content="x"), results, judge_provider=judge).to_pass_judge("c")
        assert results[0].score == 0.0
        assert "Looks fine to me" in results[0].reason

    @pytest.mark.asyncio
    async def test_negated(self):
        judge = JudgeStub('{"pass": false, "score": 0.1, "reason": "rude"}')
        results: list[GraderResult] = []
        await Expect(ChatResult(content="x"), results, judge_provider=judge).not_.to_pass_judge(
            "Is polite"
        )
        assert results[0].passed

    @pytest.mark.asyncio
    async def test_request_shape_and_usage(self):
        judge = JudgeStub('{"pass": true, "score": 1, "reason": "ok"}', cost_usd=0.002)
        results: list[GraderResult] = []
        await Expect(
            ChatResult(content="candidate text"),
            results,
            judge_provider=judge,
            judge_config=AIConfig(provider="anthropic", model="judge-model"),
        ).to_pass_judge("Criteria here")

        request = judge.requests[0]
        assert request.system == JUDGE_SYSTEM_PROMPT
        assert request.model == "judge-model"
        assert "candidate text" in request.messages[0].content
        assert "Criteria here" in request.messages[0].content
        assert results[0].usage == TokenUsage(input_tokens=50, output_tokens=10, total_tokens=60)
        assert results[0].cost_usd == 0.002

    @pytest.mark.asyncio
    async def test_no_judge_is_configuration_error(self):
        results: list[GraderResult] = []
        with pytest.raises(ConfigurationError, match="LLM judge not configured"):
            await Expect(ChatResult(content="x"), results).to_pass_judge("c")
        assert results == []

    @pytest.mark.asyncio
    async def test_per_call_judge_override_uses_resolver(self):
        default = JudgeStub('{"score": 0.0, "reason": "default"}')
        override = JudgeStub('{"score": 1.0, "reason": "override"}')
        resolved: list[AIConfig] = []

        def resolver(ai: AIConfig) -> BaseProvider:
            resolved.append(ai)
            return override

        results: list[GraderResult] = []
        await Expect(
            ChatResult(content="x"), results, judge_provider=default, provider_resolver=resolver
        ).to_pass_judge("c", judge=AIConfig(provider="openai", model="gpt-4o-mini"))

        assert resolved == [AIConfig(provider="openai", model="gpt-4o-mini")]
        assert override.requests[0].model == "gpt-4o-mini"
        assert default.requests == []
        assert results[0].passed
