"""Explicit suite construction.

``describe()`` returns a Suite builder; tasks are attached with the
suite's ``eval``/``test`` decorators. Eval files expose suites as
module-level variables, which the loader collects, so no state is
shared between files.
"""

from __future__ import annotations

from agenteval.models.suite import AIConfig, Suite, SuiteOptions
from agenteval.tools import ToolDefinition


def describe(
    name: str,
    *,
    ai: AIConfig | None = None,
    judge: AIConfig | None = None,
    system: str | None = None,
    tools: list[ToolDefinition] | None = None,
) -> Suite:
    """Create a suite with optional shared configuration."""
    options = SuiteOptions(ai=ai, judge=judge, system=system, tools=list(tools or []))
    return Suite(name=name, options=options)
