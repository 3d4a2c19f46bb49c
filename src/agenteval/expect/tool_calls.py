"""Assertions over the tool calls a model made during one exchange."""

from __future__ import annotations

from typing import Any, overload

from agenteval.adapters.base import ToolCall
from agenteval.errors import ExpectationError
from agenteval.expect.matchers import format_value, matches
from agenteval.models.result import GraderResult


def record(
    grader_results: list[GraderResult], result: GraderResult, expectation_type: str
) -> None:
    """Append a result to the trial's list, raising if it failed.

    The append happens first so failure reasons reach reporting even
    though the raise aborts the task body.
    """
    grader_results.append(result)
    if not result.passed:
        raise ExpectationError(result, expectation_type)


class ToolCallsExpect:
    """Chainable assertions over a list of ToolCall records.

    Every assertion appends exactly one GraderResult to the shared list
    and raises ExpectationError when it fails. ``not_`` returns a view
    with the polarity flipped that shares the same calls and list.
    """

    def __init__(
        self,
        tool_calls: list[ToolCall],
        grader_results: list[GraderResult],
        negated: bool = False,
    ) -> None:
        self._tool_calls = tool_calls
        self._grader_results = grader_results
        self._negated = negated

    @property
    def not_(self) -> ToolCallsExpect:
        return ToolCallsExpect(self._tool_calls, self._grader_results, not self._negated)

    @property
    def negated(self) -> bool:
        return self._negated

    def get_calls(self, name: str | None = None) -> list[ToolCall]:
        """Return all calls, or only calls to ``name``, in call order."""
        if name is None:
            return list(self._tool_calls)
        return [tc for tc in self._tool_calls if tc.name == name]

    def _called_names(self) -> str:
        return ", ".join(tc.name for tc in self._tool_calls) or "(none)"

    def _first_call(self, name: str) -> ToolCall | None:
        return next((tc for tc in self._tool_calls if tc.name == name), None)

    def _record(self, passed: bool, reason: str, expectation_type: str) -> ToolCallsExpect:
        record(
            self._grader_results,
            GraderResult(passed=passed, reason=reason),
            f"toolCalls.{expectation_type}",
        )
        return self

    def to_have_been_called(self) -> ToolCallsExpect:
        called = bool(self._tool_calls)
        count = len(self._tool_calls)
        if self._negated:
            reason = (
                f"Expected no tools to be called, but {count} call(s) were made: {self._called_names()}"
                if called
                else "No tools were called (as expected)"
            )
        else:
            reason = (
                f"Tools were called: {self._called_names()}"
                if called
                else "Expected at least one tool to be called, but none were"
            )
        return self._record(called != self._negated, reason, "toHaveBeenCalled")

    @overload
    def to_have_call_count(self, count: int, /) -> ToolCallsExpect: ...

    @overload
    def to_have_call_count(self, name: str, count: int, /) -> ToolCallsExpect: ...

    def to_have_call_count(self, name_or_count: str | int, count: int | None = None, /) -> ToolCallsExpect:
        """Assert the exact number of calls, overall or to one named tool."""
        if isinstance(name_or_count, str):
            if count is None:
                raise TypeError("to_have_call_count(name, count) requires a count")
            expected = count
            actual = len(self.get_calls(name_or_count))
            subject = f'tool "{name_or_count}"'
            subject_title = f'Tool "{name_or_count}"'
        else:
            expected = name_or_count
            actual = len(self._tool_calls)
            subject = "tools"
            subject_title = "Tools"

        equal = actual == expected
        if self._negated:
            reason = (
                f"Expected {subject} NOT to be called {expected} time(s), but it was"
                if equal
                else f"{subject_title} called {actual} time(s), not {expected} (as expected)"
            )
        else:
            reason = (
                f"{subject_title} called {actual} time(s)"
                if equal
                else f"Expected {subject} to be called {expected} time(s), but got {actual}"
            )
        return self._record(equal != self._negated, reason, "toHaveCallCount")

    def to_include(self, name: str) -> ToolCallsExpect:
        found = self._first_call(name) is not None
        if self._negated:
            reason = (
                f'Expected tool "{name}" NOT to be called, but it was'
                if found
                else f'Tool "{name}" was not called (as expected)'
            )
        else:
            reason = (
                f'Tool "{name}" was called'
                if found
                else f'Expected tool "{name}" to be called, but it was not. '
                f"Called tools: {self._called_names()}"
            )
        return self._record(found != self._negated, reason, "toInclude")

    def to_have_args(self, name: str, expected_args: dict[str, Any]) -> ToolCallsExpect:
        """Structurally match the first call to ``name`` against ``expected_args``.

        Extra actual arguments are ignored and matchers may be nested
        anywhere in ``expected_args``.
        """
        call = self._first_call(name)
        if call is None:
            reason = (
                f'Tool "{name}" was not called (as expected)'
                if self._negated
                else f'Expected tool "{name}" to be called with args, but it was never called'
            )
            return self._record(self._negated, reason, "toHaveArgs")

        args_match = matches(call.arguments, expected_args)
        if self._negated:
            reason = (
                f'Expected tool "{name}" NOT to have args {format_value(expected_args)}'
                if args_match
                else f'Tool "{name}" has different args (as expected)'
            )
        else:
            reason = (
                f'Tool "{name}" called with matching args'
                if args_match
                else f'Tool "{name}" called with different args. '
                f"Expected: {format_value(expected_args)}, Got: {format_value(call.arguments)}"
            )
        return self._record(args_match != self._negated, reason, "toHaveArgs")

    def to_have_result(self, name: str, expected_result: Any) -> ToolCallsExpect:
        """Structurally match the executor result of the first call to ``name``."""
        call = self._first_call(name)
        if call is None:
            reason = (
                f'Tool "{name}" was not called (as expected)'
                if self._negated
                else f'Tool "{name}" was not called'
            )
            return self._record(self._negated, reason, "toHaveResult")

        if not call.executed:
            reason = f'Tool "{name}" was called but not executed (no result)'
            return self._record(self._negated, reason, "toHaveResult")

        result_match = matches(call.result, expected_result)
        if self._negated:
            reason = (
                f'Expected tool "{name}" NOT to return {format_value(expected_result)}'
                if result_match
                else f'Tool "{name}" returned a different result (as expected)'
            )
        else:
            reason = (
                f'Tool "{name}" returned expected result'
                if result_match
                else f'Tool "{name}" returned different result. '
                f"Expected: {format_value(expected_result)}, Got: {format_value(call.result)}"
            )
        return self._record(result_match != self._negated, reason, "toHaveResult")
