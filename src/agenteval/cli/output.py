"""Rich terminal reporter and JSON output for run results.

The console reporter prints live as suites and tasks complete (it is
wired to the runner's lifecycle hooks) and a summary block at the end.
The JSON reporter writes the RunResult contract to stdout.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape

from agenteval import __version__
from agenteval.execution.runner import RunnerHooks
from agenteval.models.result import RunResult, SuiteResult, TaskResult, TaskStatus
from agenteval.models.suite import EvalTask, Suite

# Status -> (symbol, Rich style)
_STATUS_STYLES: dict[TaskStatus, tuple[str, str]] = {
    TaskStatus.passed: ("✓", "green"),
    TaskStatus.failed: ("✗", "red"),
    TaskStatus.error: ("✗", "bright_red"),
    TaskStatus.skipped: ("○", "yellow"),
}


def format_duration(ms: int) -> str:
    if ms < 1000:
        return f"{ms}ms"
    return f"{ms / 1000:.1f}s"


def format_cost(usd: float) -> str:
    if usd < 0.01:
        return f"${usd:.4f}"
    return f"${usd:.2f}"


def format_tokens(count: int) -> str:
    if count >= 1000:
        return f"{count / 1000:.1f}k"
    return str(count)


class ConsoleReporter:
    """Live console output for a run.

    Args:
        console: Rich Console for output.
        verbose: Also show every grader reason for passing tasks.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose

    def hooks(self) -> RunnerHooks:
        return RunnerHooks(
            on_suite_start=self.on_suite_start,
            on_suite_end=self.on_suite_end,
            on_task_end=self.on_task_end,
        )

    def on_start(self) -> None:
        self.console.print()
        self.console.print(f"[bold cyan] AGENTEVAL[/bold cyan][dim] v{__version__}[/dim]")
        self.console.print()

    def on_suite_start(self, suite: Suite) -> None:
        self.console.print(f"[dim] {escape(suite.file)}[/dim]")
        self.console.print(f"   [bold]{escape(suite.name)}[/bold]")

    def on_task_end(self, task: EvalTask, suite: Suite, result: TaskResult) -> None:
        symbol, style = _STATUS_STYLES[result.status]
        self.console.print(
            f"     [{style}]{symbol}[/{style}] {escape(task.name)} "
            f"[dim]({format_duration(result.duration)})[/dim]"
        )

        if result.status in (TaskStatus.failed, TaskStatus.error):
            for trial in result.trials:
                if trial.error:
                    self.console.print(f"[red]       └─ {escape(trial.error)}[/red]")
                for grader in trial.grader_results:
                    # The first failing reason is already the trial error
                    if not grader.passed and grader.reason != trial.error:
                        self.console.print(f"[red]       └─ {escape(grader.reason)}[/red]")
        elif self.verbose and result.status == TaskStatus.passed:
            for trial in result.trials:
                for grader in trial.grader_results:
                    self.console.print(f"[dim]       └─ {escape(grader.reason)}[/dim]")

    def on_suite_end(self, suite: Suite, result: SuiteResult) -> None:
        self.console.print()

    def on_end(self, result: RunResult) -> None:
        self.console.print(f"[dim] {'─' * 45}[/dim]")

        summary = result.summary
        parts = [f"[green]{summary.passed} passed[/green]"]
        if summary.failed:
            parts.append(f"[red]{summary.failed} failed[/red]")
        if summary.skipped:
            parts.append(f"[yellow]{summary.skipped} skipped[/yellow]")
        parts.append(f"[dim]{summary.total} total[/dim]")

        self.console.print(f" Tests:    {', '.join(parts)}")
        self.console.print(f" Time:     {format_duration(result.duration)}")
        if result.usage.total_tokens > 0:
            self.console.print(
                f" Tokens:   {format_tokens(result.usage.input_tokens)} input, "
                f"{format_tokens(result.usage.output_tokens)} output"
            )
        if result.cost_usd > 0:
            self.console.print(f" Cost:     {format_cost(result.cost_usd)}")
        self.console.print()

        if not result.success:
            self.console.print("[red] Some tests failed.[/red]")
            self.console.print()


def output_json(result: RunResult) -> None:
    """Write the run result as pure JSON to stdout.

    No Rich markup, no color, no extra text. Field names are the
    camelCase names of the result contract.
    """
    sys.stdout.write(result.model_dump_json(by_alias=True, indent=2))
    sys.stdout.write("\n")
