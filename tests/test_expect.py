"""Tests for agenteval.expect.expect - content assertions, custom graders, negation."""

from __future__ import annotations

import pytest

from agenteval.adapters.base import ChatResult
from agenteval.errors import ExpectationError
from agenteval.expect.expect import Expect
from agenteval.graders import define_grader
from agenteval.models.result import GraderResult


def _expect(content: str, results: list[GraderResult] | None = None) -> Expect:
    return Expect(ChatResult(content=content), results if results is not None else [])


class TestToContain:
    """Substring assertions."""

    def test_case_insensitive_by_default(self):
        results: list[GraderResult] = []
        _expect("Hello World", results).to_contain("hello")
        assert results[0].passed
        assert results[0].reason == 'Output contains "hello"'

    def test_case_sensitive_fails_on_case_mismatch(self):
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError) as exc_info:
            _expect("Hello World", results).to_contain("hello", case_sensitive=True)
        assert exc_info.value.expectation_type == "toContain"
        assert len(results) == 1
        assert not results[0].passed
        assert results[0].reason == 'Expected output to contain "hello", but it was not found'

    def test_negated_pass_when_absent(self):
        results: list[GraderResult] = []
        _expect("all good", results).not_.to_contain("error")
        assert results[0].passed

    def test_negated_fail_when_present(self):
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError):
            _expect("an error occurred", results).not_.to_contain("error")
        assert results[0].reason == 'Expected output NOT to contain "error"'

    def test_chaining_returns_self(self):
        results: list[GraderResult] = []
        e = _expect("alpha beta", results)
        assert e.to_contain("alpha").to_contain("beta") is e
        assert len(results) == 2

    def test_double_negation_restores_polarity(self):
        e = _expect("hello")
        assert e.not_.negated
        assert e.not_.not_.negated is False
        e.not_.not_.to_contain("hello")


class TestToMatch:
    """Regex assertions."""

    def test_string_pattern(self):
        results: list[GraderResult] = []
        _expect("The answer is 4", results).to_match(r"\b4\b")
        assert results[0].passed

    def test_no_implicit_case_insensitivity(self):
        with pytest.raises(ExpectationError) as exc_info:
            _expect("FOUR").to_match("four")
        assert "/four/" in str(exc_info.value)

    def test_negated(self):
        results: list[GraderResult] = []
        _expect("no digits here", results).not_.to_match(r"\d")
        assert results[0].passed


class TestToAskQuestions:
    """Question-mark counting heuristic."""

    def test_within_range(self):
        results: list[GraderResult] = []
        _expect("What? Why? How?", results).to_ask_questions(min=1, max=3)
        assert results[0].passed

    def test_above_max_fails(self):
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError):
            _expect("What? Why? How?", results).to_ask_questions(max=2)
        assert results[0].reason == "Expected 0-2 questions, but found 3"

    def test_fractional_max_reported_exactly(self):
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError):
            _expect("What? Why? How?", results).to_ask_questions(max=2.5)
        assert results[0].reason == "Expected 0-2.5 questions, but found 3"

    def test_default_has_no_upper_bound(self):
        results: list[GraderResult] = []
        _expect("?" * 50, results).to_ask_questions(min=1)
        assert results[0].passed

    def test_rhetorical_question_marks_count(self):
        with pytest.raises(ExpectationError):
            _expect('She said "really?" and left.').to_ask_questions(max=0)

    def test_negated(self):
        results: list[GraderResult] = []
        _expect("No questions.", results).not_.to_ask_questions(min=1)
        assert results[0].passed


class TestCustomGrader:
    """to(grader) and to_async(grader)."""

    def test_sync_grader_recorded_immediately(self):
        results: list[GraderResult] = []
        e = _expect("please and thank you", results)
        returned = e.to(lambda r: GraderResult(passed="please" in r.content, reason="polite"))
        assert returned is e
        assert results[0].passed

    def test_sync_grader_mapping_result(self):
        results: list[GraderResult] = []
        _expect("x", results).to(lambda r: {"pass": True, "reason": "ok", "score": 0.9})
        assert results[0].score == 0.9

    def test_sync_grader_failure_raises(self):
        results: list[GraderResult] = []
        with pytest.raises(ExpectationError) as exc_info:
            _expect("x", results).to(lambda r: GraderResult(passed=False, reason="nope"))
        assert exc_info.value.expectation_type == "custom"
        assert results[0].reason == "nope"

    @pytest.mark.asyncio
    async def test_async_grader_records_on_await(self):
        results: list[GraderResult] = []

        async def grader(result: ChatResult) -> GraderResult:
            return GraderResult(passed=True, reason="async ok")

        e = _expect("x", results)
        pending = e.to_async(grader)
        assert results == []
        assert await pending is e
        assert results[0].reason == "async ok"

    @pytest.mark.asyncio
    async def test_async_grader_failure_raises_on_await(self):
        results: list[GraderResult] = []

        async def grader(result: ChatResult) -> GraderResult:
            return GraderResult(passed=False, reason="async fail")

        with pytest.raises(ExpectationError):
            await _expect("x", results).to_async(grader)
        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_to_async_accepts_sync_grader(self):
        results: list[GraderResult] = []
        await _expect("x", results).to_async(lambda r: {"pass": True, "reason": "sync"})
        assert results[0].reason == "sync"

    def test_sync_entry_rejects_async_grader(self):
        results: list[GraderResult] = []

        async def grader(result: ChatResult) -> GraderResult:
            return GraderResult(passed=True, reason="never")

        with pytest.raises(TypeError, match="to_async"):
            _expect("x", results).to(grader)
        assert results == []

    def test_negated_flips_and_marks_reason(self):
        results: list[GraderResult] = []
        _expect("x", results).not_.to(lambda r: GraderResult(passed=False, reason="bad"))
        assert results[0].passed
        assert results[0].reason == "(negated) bad"

    def test_negated_does_not_double_mark(self):
        results: list[GraderResult] = []
        _expect("x", results).not_.to(
            lambda r: GraderResult(passed=False, reason="(negated) already")
        )
        assert results[0].reason == "(negated) already"

    def test_named_grader(self):
        results: list[GraderResult] = []
        short = define_grader(
            "is-short", lambda r: GraderResult(passed=len(r.content) < 10, reason="length")
        )
        assert short.name == "is-short"
        _expect("brief", results).to(short)
        assert results[0].passed

    def test_grader_returning_wrong_type(self):
        with pytest.raises(TypeError):
            _expect("x").to(lambda r: True)


class TestSharedResults:
    """All views share one result list."""

    def test_not_and_tool_calls_share_list(self):
        results: list[GraderResult] = []
        e = _expect("text", results)
        e.to_contain("text")
        e.not_.to_contain("other")
        e.tool_calls.not_.to_have_been_called()
        assert len(results) == 3
        assert all(r.passed for r in results)

    def test_tool_calls_inherit_negation(self):
        e = _expect("text")
        assert e.not_.tool_calls.negated
        assert not e.tool_calls.negated
