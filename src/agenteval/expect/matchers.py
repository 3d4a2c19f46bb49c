"""Structural matchers for partial, deep comparison of structured values.

Matchers can be nested at any depth inside an expected value; ``matches``
dispatches on the matcher type instead of comparing by equality.
Plain mappings in an expected value match like ``object_containing``
(extra actual keys are ignored); plain lists must have the same length
and match element-wise. ``matches`` never raises: any type mismatch is
simply ``False``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any


class Matcher:
    """Base class for the closed set of matcher variants."""

    def match(self, value: Any) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return self.describe()


class ObjectContaining(Matcher):
    def __init__(self, expected: Mapping[str, Any]) -> None:
        self.expected = dict(expected)

    def match(self, value: Any) -> bool:
        return _match_mapping(value, self.expected)

    def describe(self) -> str:
        return f"ObjectContaining({format_value(self.expected)})"


class ArrayContaining(Matcher):
    def __init__(self, expected: Sequence[Any]) -> None:
        self.expected = list(expected)

    def match(self, value: Any) -> bool:
        if not _is_array(value):
            return False
        return all(
            any(matches(actual, item) for actual in value) for item in self.expected
        )

    def describe(self) -> str:
        return f"ArrayContaining({format_value(self.expected)})"


class StringMatching(Matcher):
    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def match(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return self.pattern.search(value) is not None

    def describe(self) -> str:
        return f"StringMatching(/{self.pattern.pattern}/)"


class Anything(Matcher):
    def match(self, value: Any) -> bool:
        return True

    def describe(self) -> str:
        return "Anything"


def object_containing(expected: Mapping[str, Any]) -> ObjectContaining:
    """Match any mapping that has at least these keys with matching values."""
    return ObjectContaining(expected)


def array_containing(expected: Sequence[Any]) -> ArrayContaining:
    """Match any list containing a matching element for every expected item."""
    return ArrayContaining(expected)


def string_matching(pattern: str | re.Pattern[str]) -> StringMatching:
    """Match any string the pattern finds a match in."""
    return StringMatching(pattern)


def anything() -> Anything:
    """Wildcard that matches any value."""
    return Anything()


def matches(actual: Any, expected: Any) -> bool:
    """Return True if ``actual`` structurally matches ``expected``."""
    try:
        return _matches(actual, expected)
    except (TypeError, ValueError, RecursionError):
        return False


def _matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, Matcher):
        return expected.match(actual)
    if isinstance(expected, Mapping):
        return _match_mapping(actual, expected)
    if _is_array(expected):
        if not _is_array(actual) or len(actual) != len(expected):
            return False
        return all(_matches(a, e) for a, e in zip(actual, expected))
    return _strict_equal(actual, expected)


def _match_mapping(actual: Any, expected: Mapping[str, Any]) -> bool:
    if not isinstance(actual, Mapping):
        return False
    for key, value in expected.items():
        if key not in actual:
            return False
        if not _matches(actual[key], value):
            return False
    return True


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _strict_equal(actual: Any, expected: Any) -> bool:
    # bool is an int subclass; never let True == 1 through
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(expected, (int, float)):
        return isinstance(actual, (int, float)) and actual == expected
    if expected is None:
        return actual is None
    return type(actual) is type(expected) and actual == expected


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Matcher):
        return f"<{value.describe()}>"
    if isinstance(value, Mapping):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if _is_array(value):
        return [_to_jsonable(v) for v in value]
    return value


def format_value(value: Any) -> str:
    """Render a value (possibly containing matchers) for failure reasons."""
    return json.dumps(_to_jsonable(value), default=repr, ensure_ascii=False)
