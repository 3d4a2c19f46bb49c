"""Import eval files and collect the suites they define.

Each file is executed as its own module; every module-level Suite is
collected in definition order and stamped with the file it came from.
"""

from __future__ import annotations

import hashlib
import importlib.util
import sys
from collections.abc import Iterable
from pathlib import Path

import structlog

from agenteval.models.suite import Suite

logger = structlog.get_logger(__name__)


class EvalFileLoadError(Exception):
    """Raised when an eval file cannot be imported."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:10]
    stem = path.name.replace(".", "_").replace("-", "_")
    return f"agenteval_eval_{stem}_{digest}"


def load_eval_file(path: Path) -> list[Suite]:
    """Import one eval file and return its module-level suites.

    Raises:
        EvalFileLoadError: If no import spec can be built for the file.
        Exception: Whatever the eval file raises while executing.
    """
    path = path.resolve()
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise EvalFileLoadError(path, "cannot build an import spec")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise

    suites: list[Suite] = []
    seen: set[int] = set()
    for value in vars(module).values():
        if isinstance(value, Suite) and id(value) not in seen:
            seen.add(id(value))
            value.file = str(path)
            suites.append(value)

    logger.debug("loader.file_loaded", file=str(path), suites=len(suites))
    return suites


def load_eval_files(files: Iterable[Path]) -> list[Suite]:
    """Load every file in order and concatenate their suites."""
    suites: list[Suite] = []
    for path in files:
        suites.extend(load_eval_file(path))
    return suites
