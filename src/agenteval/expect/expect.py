"""Expect: chainable assertions over one model response.

Each assertion appends exactly one GraderResult to the trial-scoped
list it shares with every other Expect built in the same trial, and
raises ExpectationError on failure so the task body stops at the first
failing assertion. ``not_`` returns a new view with the polarity
flipped; flipping twice restores the original polarity.
"""

from __future__ import annotations

import inspect
import math
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from agenteval.adapters.base import BaseProvider, ChatRequest, ChatResult, Message
from agenteval.errors import ConfigurationError
from agenteval.expect.judge import JUDGE_SYSTEM_PROMPT, build_judge_user_prompt, parse_judgment
from agenteval.expect.tool_calls import ToolCallsExpect, record
from agenteval.models.result import GraderResult
from agenteval.models.suite import AIConfig

GraderOutput = GraderResult | Mapping[str, Any]
GraderFn = Callable[[ChatResult], "GraderOutput | Awaitable[GraderOutput]"]
ProviderResolver = Callable[[AIConfig], BaseProvider]

NEGATED_PREFIX = "(negated) "


@dataclass(frozen=True)
class JudgeOptions:
    """Options for ``to_pass_judge``. ``judge`` overrides the judge provider."""

    criteria: str
    threshold: float = 0.5
    judge: AIConfig | None = None


def _coerce_grader_output(output: Any) -> GraderResult:
    if isinstance(output, GraderResult):
        return output
    if isinstance(output, Mapping):
        return GraderResult.model_validate(output)
    raise TypeError(
        f"Custom grader must return a GraderResult or a mapping, got {type(output).__name__}"
    )


class Expect:
    """Assertions over a single ChatResult.

    Args:
        result: The response under test.
        grader_results: Trial-scoped list every assertion appends to.
        judge_provider: Provider used by ``to_pass_judge``.
        judge_config: Model configuration for the judge.
        provider_resolver: Resolves a per-call judge override to a provider.
        negated: Polarity of this view.
    """

    def __init__(
        self,
        result: ChatResult,
        grader_results: list[GraderResult],
        judge_provider: BaseProvider | None = None,
        judge_config: AIConfig | None = None,
        provider_resolver: ProviderResolver | None = None,
        negated: bool = False,
    ) -> None:
        self._result = result
        self._grader_results = grader_results
        self._judge_provider = judge_provider
        self._judge_config = judge_config
        self._provider_resolver = provider_resolver
        self._negated = negated

    @property
    def not_(self) -> Expect:
        return Expect(
            self._result,
            self._grader_results,
            self._judge_provider,
            self._judge_config,
            self._provider_resolver,
            negated=not self._negated,
        )

    @property
    def negated(self) -> bool:
        return self._negated

    @property
    def tool_calls(self) -> ToolCallsExpect:
        return ToolCallsExpect(self._result.tool_calls, self._grader_results, self._negated)

    def _record(self, result: GraderResult, expectation_type: str) -> Expect:
        record(self._grader_results, result, expectation_type)
        return self

    def to_contain(self, text: str, *, case_sensitive: bool = False) -> Expect:
        """Substring search on the response content (case-folded by default)."""
        content = self._result.content
        if case_sensitive:
            found = text in content
        else:
            found = text.lower() in content.lower()

        if self._negated:
            reason = (
                f'Expected output NOT to contain "{text}"'
                if found
                else f'Output does not contain "{text}" (as expected)'
            )
        else:
            reason = (
                f'Output contains "{text}"'
                if found
                else f'Expected output to contain "{text}", but it was not found'
            )
        return self._record(GraderResult(passed=found != self._negated, reason=reason), "toContain")

    def to_match(self, pattern: str | re.Pattern[str]) -> Expect:
        """Regex search on the response content. String patterns use default flags."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        found = regex.search(self._result.content) is not None
        shown = f"/{regex.pattern}/"

        if self._negated:
            reason = (
                f"Expected output NOT to match pattern {shown}"
                if found
                else f"Output does not match pattern {shown} (as expected)"
            )
        else:
            reason = (
                f"Output matches pattern {shown}"
                if found
                else f"Expected output to match pattern {shown}, but it did not"
            )
        return self._record(GraderResult(passed=found != self._negated, reason=reason), "toMatch")

    def to_ask_questions(self, *, min: int = 0, max: float | None = None) -> Expect:
        """Count literal '?' characters as a proxy for the number of questions.

        This is a heuristic: rhetorical or quoted question marks count too.
        """
        lower = min
        upper = math.inf if max is None else max
        count = self._result.content.count("?")
        in_range = lower <= count <= upper
        bounds = f"{lower}-{'inf' if upper == math.inf else format(upper, 'g')}"

        if self._negated:
            reason = (
                f"Expected NOT to ask {bounds} questions, but found {count}"
                if in_range
                else f"Output asks {count} questions, outside {bounds} (as expected)"
            )
        else:
            reason = (
                f"Output asks {count} questions (within {bounds})"
                if in_range
                else f"Expected {bounds} questions, but found {count}"
            )
        return self._record(
            GraderResult(passed=in_range != self._negated, reason=reason), "toAskQuestions"
        )

    def to(self, grader: GraderFn) -> Expect:
        """Run a synchronous custom grader and record its result.

        Raises:
            TypeError: If the grader returns an awaitable; use
                ``await expect.to_async(grader)`` for async graders.
        """
        output = grader(self._result)
        if inspect.isawaitable(output):
            if inspect.iscoroutine(output):
                output.close()
            raise TypeError(
                "Grader returned an awaitable; use `await expect.to_async(grader)` instead"
            )
        return self._finish_custom(output)

    async def to_async(self, grader: GraderFn) -> Expect:
        """Run a custom grader that may be async; records once it resolves."""
        output = grader(self._result)
        if inspect.isawaitable(output):
            output = await output
        return self._finish_custom(output)

    def _finish_custom(self, output: Any) -> Expect:
        graded = _coerce_grader_output(output)
        if self._negated:
            reason = graded.reason
            if not reason.startswith(NEGATED_PREFIX):
                reason = f"{NEGATED_PREFIX}{reason}"
            graded = graded.model_copy(update={"passed": not graded.passed, "reason": reason})
        return self._record(graded, "custom")

    def _resolve_judge(self, override: AIConfig | None) -> tuple[BaseProvider, str | None]:
        if override is not None and self._provider_resolver is not None:
            return self._provider_resolver(override), override.model

        if self._judge_provider is None:
            raise ConfigurationError(
                "LLM judge not configured. Set a judge or ai config on the suite "
                "or task, and make sure provider API keys are set."
            )
        model = override.model if override is not None else None
        if model is None and self._judge_config is not None:
            model = self._judge_config.model
        return self._judge_provider, model

    async def to_pass_judge(
        self,
        criteria_or_options: str | JudgeOptions | Mapping[str, Any],
        *,
        threshold: float | None = None,
        judge: AIConfig | None = None,
    ) -> Expect:
        """Ask an LLM judge to score the response against natural-language criteria.

        The assertion passes when the judge's score is at least the
        threshold (default 0.5); the judge's own ``pass`` field is not
        used for gating. Unparseable judge replies become a failing
        result with score 0.

        Raises:
            ConfigurationError: If no judge provider is available.
            ExpectationError: If the (possibly negated) assertion fails.
        """
        if isinstance(criteria_or_options, str):
            options = JudgeOptions(criteria=criteria_or_options)
        elif isinstance(criteria_or_options, JudgeOptions):
            options = criteria_or_options
        else:
            options = JudgeOptions(**criteria_or_options)
        if threshold is not None or judge is not None:
            options = JudgeOptions(
                criteria=options.criteria,
                threshold=options.threshold if threshold is None else threshold,
                judge=options.judge if judge is None else judge,
            )

        provider, model = self._resolve_judge(options.judge)

        judge_result = await provider.chat(
            ChatRequest(
                model=model,
                system=JUDGE_SYSTEM_PROMPT,
                messages=[
                    Message(
                        role="user",
                        content=build_judge_user_prompt(options.criteria, self._result.content),
                    )
                ],
            )
        )

        judgment = parse_judgment(judge_result.content)
        passes_threshold = judgment.score >= options.threshold
        passed = passes_threshold != self._negated
        score = f"{judgment.score:.2f}"

        if self._negated:
            reason = (
                f"Expected NOT to pass judge (score: {score}). {judgment.reason}"
                if passes_threshold
                else f"Did not pass judge (as expected). {judgment.reason}"
            )
        else:
            reason = (
                f"Passed judge (score: {score}). {judgment.reason}"
                if passes_threshold
                else f"Failed judge (score: {score}, threshold: {options.threshold}). {judgment.reason}"
            )

        return self._record(
            GraderResult(
                passed=passed,
                reason=reason.strip(),
                score=judgment.score,
                usage=judge_result.usage,
                cost_usd=judge_result.cost_usd,
            ),
            "toPassJudge",
        )


def create_expect(
    result: ChatResult,
    grader_results: list[GraderResult],
    judge_provider: BaseProvider | None = None,
    judge_config: AIConfig | None = None,
    provider_resolver: ProviderResolver | None = None,
) -> Expect:
    return Expect(result, grader_results, judge_provider, judge_config, provider_resolver)
