"""agenteval loader - eval-file discovery and import."""

from agenteval.loader.discovery import discover_eval_files, filter_by_pattern, pattern_to_glob
from agenteval.loader.loader import EvalFileLoadError, load_eval_file, load_eval_files

__all__ = [
    "EvalFileLoadError",
    "discover_eval_files",
    "filter_by_pattern",
    "load_eval_file",
    "load_eval_files",
    "pattern_to_glob",
]
