"""LLM judge prompt building and judgment extraction.

The judge is asked for strict JSON ``{pass, score, reason}``. Replies
are free text, so the first ``{`` to the last ``}`` is parsed; anything
that does not yield a numeric score degrades to a failing judgment
rather than raising.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


JUDGE_SYSTEM_PROMPT = """You are an evaluation judge. Analyze the AI output and determine if it meets the given criteria.
Respond with a JSON object containing:
- "pass": boolean (true if the output meets the criteria)
- "score": number between 0 and 1 (confidence score)
- "reason": string (brief explanation of your judgment)

Be objective and precise in your evaluation."""


JUDGE_USER_TEMPLATE = """## Criteria
{criteria}

## AI Output to Evaluate
{content}

## Your Judgment (JSON)"""


@dataclass(frozen=True)
class Judgment:
    """A parsed judge verdict. ``passed`` is informational only."""

    passed: bool
    score: float
    reason: str


def build_judge_user_prompt(criteria: str, content: str) -> str:
    return JUDGE_USER_TEMPLATE.format(criteria=criteria, content=content)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Parse the span from the first '{' to the last '}' as a JSON object."""
    if not text:
        return None
    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace == -1 or last_brace <= first_brace:
        return None
    try:
        result = json.loads(text[first_brace : last_brace + 1])
    except (json.JSONDecodeError, ValueError):
        return None
    return result if isinstance(result, dict) else None


def parse_judgment(text: str) -> Judgment:
    """Turn a judge reply into a Judgment, never raising.

    The score is clamped to [0.0, 1.0]. Replies without a JSON object or
    without a finite numeric score (NaN and Infinity included) become a
    failing judgment with score 0.
    """
    data = extract_json_object(text)
    score = data.get("score") if data is not None else None
    if (
        not isinstance(score, (int, float))
        or isinstance(score, bool)
        or not math.isfinite(score)
    ):
        logger.warning("judge.parse_failed", raw=text[:200])
        return Judgment(
            passed=False,
            score=0.0,
            reason=f"Failed to parse judge response: {text}",
        )

    return Judgment(
        passed=bool(data.get("pass", False)),
        score=max(0.0, min(1.0, float(score))),
        reason=str(data.get("reason", "")),
    )
