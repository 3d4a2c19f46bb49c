"""Eval-file discovery by include/exclude glob patterns."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from fnmatch import fnmatch
from pathlib import Path

from agenteval.models.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE


def _is_excluded(relative: str, exclude: Iterable[str]) -> bool:
    for pattern in exclude:
        if fnmatch(relative, pattern):
            return True
        # "**/" also matches at the root
        if pattern.startswith("**/") and fnmatch(relative, pattern[3:]):
            return True
    return False


def discover_eval_files(
    root: Path,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> list[Path]:
    """Find eval files under root.

    Args:
        root: Directory to search.
        include: Glob patterns relative to root (default: ``*.eval.py``
            and ``*_eval.py`` files anywhere).
        exclude: Glob patterns for files to drop.

    Returns:
        Sorted, de-duplicated absolute paths.
    """
    root = root.resolve()
    include = DEFAULT_INCLUDE if include is None else include
    exclude = DEFAULT_EXCLUDE if exclude is None else exclude

    found: set[Path] = set()
    for pattern in include:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            if _is_excluded(path.relative_to(root).as_posix(), exclude):
                continue
            found.add(path)
    return sorted(found)


def filter_by_pattern(files: Iterable[Path], pattern: str) -> list[Path]:
    """Keep files whose path matches a case-insensitive regex (``--grep``)."""
    regex = re.compile(pattern, re.IGNORECASE)
    return [f for f in files if regex.search(str(f))]


def pattern_to_glob(pattern: str) -> str:
    """CLI patterns without a wildcard match any file containing them."""
    return pattern if "*" in pattern else f"**/*{pattern}*"
