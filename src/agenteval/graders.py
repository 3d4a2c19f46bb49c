"""Named custom graders.

A grader is any callable taking a ChatResult and returning a
GraderResult (or a mapping with ``pass``/``reason``), directly or as an
awaitable. Sync graders go through ``expect.to(grader)``, async ones
through ``await expect.to_async(grader)``. ``define_grader`` only
attaches a name for reporting.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from agenteval.adapters.base import ChatResult


class NamedGrader:
    """A grader callable with a display name."""

    def __init__(self, name: str, fn: Callable[[ChatResult], Any | Awaitable[Any]]) -> None:
        self.name = name
        self._fn = fn

    def __call__(self, result: ChatResult) -> Any:
        return self._fn(result)

    def __repr__(self) -> str:
        return f"NamedGrader({self.name!r})"


def define_grader(name: str, fn: Callable[[ChatResult], Any | Awaitable[Any]]) -> NamedGrader:
    """Define a reusable grader.

    Example::

        is_polite = define_grader(
            "is-polite",
            lambda result: GraderResult(
                passed="please" in result.content.lower(),
                reason="Checked for politeness",
            ),
        )
        ctx.expect(result).to(is_polite)
    """
    return NamedGrader(name, fn)
