"""agenteval assertion engine.

Re-exports the Expect wrapper, tool-call assertions, the structural
matcher factories and the judge prompt helpers.
"""

from agenteval.expect.expect import Expect, JudgeOptions, create_expect
from agenteval.expect.judge import Judgment, parse_judgment
from agenteval.expect.matchers import (
    Matcher,
    anything,
    array_containing,
    format_value,
    matches,
    object_containing,
    string_matching,
)
from agenteval.expect.tool_calls import ToolCallsExpect

__all__ = [
    "Expect",
    "JudgeOptions",
    "Judgment",
    "Matcher",
    "ToolCallsExpect",
    "anything",
    "array_containing",
    "create_expect",
    "format_value",
    "matches",
    "object_containing",
    "parse_judgment",
    "string_matching",
]
