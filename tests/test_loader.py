"""Tests for agenteval.loader - eval file discovery and suite loading."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from agenteval.loader import discover_eval_files, filter_by_pattern, load_eval_file, load_eval_files
from agenteval.loader.discovery import pattern_to_glob
from agenteval.models.suite import Suite

EVAL_SOURCE = '''
from agenteval import AIConfig, describe

suite = describe("{name}", ai=AIConfig(provider="anthropic", model="m"))
alias = suite

@suite.eval("says hello")
async def says_hello(ctx):
    pass

other = describe("{name} extra")
'''


def _touch(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestDiscovery:
    def test_default_patterns(self, tmp_path):
        a = _touch(tmp_path / "a.eval.py")
        b = _touch(tmp_path / "evals" / "nested" / "b_eval.py")
        _touch(tmp_path / "evals" / "helper.py")
        _touch(tmp_path / ".venv" / "lib" / "c.eval.py")
        _touch(tmp_path / "node_modules" / "d.eval.py")

        assert discover_eval_files(tmp_path) == sorted([a.resolve(), b.resolve()])

    def test_custom_include_and_exclude(self, tmp_path):
        keep = _touch(tmp_path / "evals" / "keep.eval.py")
        _touch(tmp_path / "evals" / "skip.eval.py")
        _touch(tmp_path / "other" / "x.eval.py")

        files = discover_eval_files(
            tmp_path, include=["evals/*.eval.py"], exclude=["**/skip.*"]
        )
        assert files == [keep.resolve()]

    def test_overlapping_patterns_deduplicated(self, tmp_path):
        only = _touch(tmp_path / "x.eval.py")
        files = discover_eval_files(tmp_path, include=["*.eval.py", "**/*.eval.py"], exclude=[])
        assert files == [only.resolve()]

    def test_directories_ignored(self, tmp_path):
        (tmp_path / "dir.eval.py").mkdir()
        assert discover_eval_files(tmp_path) == []

    def test_filter_by_pattern_is_case_insensitive(self):
        files = [Path("/p/Weather.eval.py"), Path("/p/billing.eval.py")]
        assert filter_by_pattern(files, "weather") == [files[0]]
        assert filter_by_pattern(files, "^nothing$") == []

    def test_pattern_to_glob(self):
        assert pattern_to_glob("weather") == "**/*weather*"
        assert pattern_to_glob("evals/*.eval.py") == "evals/*.eval.py"


class TestLoading:
    def test_collects_module_level_suites(self, tmp_path):
        path = _touch(tmp_path / "hello.eval.py", EVAL_SOURCE.format(name="hello"))

        suites = load_eval_file(path)

        assert [s.name for s in suites] == ["hello", "hello extra"]
        assert all(isinstance(s, Suite) for s in suites)
        assert suites[0].file == str(path.resolve())
        assert [t.name for t in suites[0].tasks] == ["says hello"]

    def test_files_do_not_share_state(self, tmp_path):
        first = _touch(tmp_path / "a" / "same.eval.py", EVAL_SOURCE.format(name="a"))
        second = _touch(tmp_path / "b" / "same.eval.py", EVAL_SOURCE.format(name="b"))

        suites = load_eval_files([first, second])

        assert [s.name for s in suites] == ["a", "a extra", "b", "b extra"]
        assert len(suites[0].tasks) == 1
        assert len(suites[2].tasks) == 1

    def test_broken_file_raises_and_is_not_registered(self, tmp_path):
        path = _touch(tmp_path / "broken.eval.py", "raise RuntimeError('bad eval file')\n")
        before = set(sys.modules)

        with pytest.raises(RuntimeError, match="bad eval file"):
            load_eval_file(path)

        assert not [m for m in set(sys.modules) - before if m.startswith("agenteval_eval_")]

    def test_file_without_suites(self, tmp_path):
        path = _touch(tmp_path / "empty.eval.py", "x = 1\n")
        assert load_eval_file(path) == []
