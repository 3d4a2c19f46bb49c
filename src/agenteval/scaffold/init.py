"""Project scaffolding for `agenteval init`.

Writes a config file and an example eval file. Printing is left to the
CLI command.
"""

from __future__ import annotations

from pathlib import Path


CONFIG_TEMPLATE = """\
# agenteval configuration
#
# API keys can also be set via environment variables:
# ANTHROPIC_API_KEY, OPENAI_API_KEY
providers:
  anthropic: {}
  openai: {}

# Eval file discovery
include:
  - "**/*.eval.py"
  - "**/*_eval.py"
exclude:
  - "**/.venv/**"
  - "**/__pycache__/**"

# Execution
trials: 1            # runs per task (pass@k)
timeout: 60000       # per-task timeout (ms)
parallel: true       # run tasks of a suite concurrently
max_concurrency: 5   # tasks per concurrent batch
# max_cost: 1.00     # stop starting trials once this much USD is spent

# Default LLM judge (suites and tasks may override)
judge:
  provider: anthropic
  model: claude-sonnet-4-20250514

reporters:
  - console
"""

EXAMPLE_EVAL_TEMPLATE = '''\
from agenteval import anthropic, describe

hello = describe(
    "hello-world",
    ai=anthropic("claude-sonnet-4-20250514"),
    system="You are a friendly assistant. Keep responses brief.",
)


@hello.eval("responds to greeting")
async def responds_to_greeting(ctx):
    result = await ctx.ai.prompt("Hello!")

    ctx.expect(result).to_contain("hello")
    ctx.expect(result).not_.to_contain("error")


@hello.eval("answers math questions")
async def answers_math(ctx):
    result = await ctx.ai.prompt("What is 2 + 2? Just give me the number.")

    ctx.expect(result).to_match(r"4|four")


@hello.eval("maintains conversation context")
async def maintains_context(ctx):
    await ctx.ai.prompt("My favorite color is blue.")
    result = await ctx.ai.prompt("What is my favorite color?")

    ctx.expect(result).to_contain("blue")


@hello.eval("is helpful")
async def is_helpful(ctx):
    result = await ctx.ai.prompt("Can you help me?")

    await ctx.expect(result).to_pass_judge("Responds helpfully and offers assistance")
'''

SCAFFOLD_FILES: dict[str, str] = {
    "agenteval.yaml": CONFIG_TEMPLATE,
    "evals/hello.eval.py": EXAMPLE_EVAL_TEMPLATE,
}


class ProjectExistsError(Exception):
    """Scaffolding would overwrite files that are already present."""

    def __init__(self, conflicting_files: list[str]) -> None:
        self.conflicting_files = conflicting_files
        super().__init__(f"Files already exist: {', '.join(conflicting_files)}")


def scaffold_project(directory: Path, force: bool = False) -> list[str]:
    """Write the starter config and example eval under ``directory``.

    Nothing is written when any target exists and ``force`` is False.

    Returns:
        The created paths, relative to ``directory``.

    Raises:
        ProjectExistsError: If targets exist and ``force`` is False.
    """
    root = directory.resolve()
    existing = [rel for rel in SCAFFOLD_FILES if (root / rel).exists()]
    if existing and not force:
        raise ProjectExistsError(existing)

    for rel, content in SCAFFOLD_FILES.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return list(SCAFFOLD_FILES)
