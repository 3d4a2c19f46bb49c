"""agenteval run -- discover eval files, run their suites, report results.

Loads agenteval.yaml (or --config), applies CLI overrides, discovers
and imports eval files, builds providers from configured API keys, runs
every suite and renders the result with the selected reporter. Exits 0
when every task passed or was skipped, 1 otherwise.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from agenteval.adapters.registry import create_providers_from_config
from agenteval.cli.output import ConsoleReporter, output_json
from agenteval.errors import ConfigurationError
from agenteval.execution.runner import RunnerHooks, run_suites
from agenteval.loader.discovery import discover_eval_files, filter_by_pattern, pattern_to_glob
from agenteval.loader.loader import load_eval_files
from agenteval.log import configure_logging
from agenteval.models.config import RunConfig, load_config, load_config_file

console = Console(stderr=True)


def run(
    patterns: Optional[list[str]] = typer.Argument(None, help="File patterns to run (default: config include)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to agenteval.yaml"),
    grep: Optional[str] = typer.Option(None, "--grep", "-g", help="Only run files matching this regex"),
    trials: Optional[int] = typer.Option(None, "--trials", "-n", min=1, help="Trials per task (pass@k)"),
    max_cost: Optional[float] = typer.Option(None, "--max-cost", min=0.0, help="Stop starting trials after this much USD"),
    reporter: Optional[str] = typer.Option(None, "--reporter", "-r", help="Reporter: console or json"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Show every grader reason"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List the eval files that would run"),
    log_level: str = typer.Option("warning", "--log-level", help="Log level for stderr logs"),
    log_format: str = typer.Option("console", "--log-format", help="Log format: console or json"),
) -> None:
    """Run eval suites and report results."""
    try:
        configure_logging(log_level, log_format)
    except ValueError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    asyncio.run(
        _run_async(
            patterns or [],
            config_path=config_path,
            grep=grep,
            trials=trials,
            max_cost=max_cost,
            reporter=reporter,
            verbose=verbose,
            dry_run=dry_run,
        )
    )


def _load_run_config(
    config_path: Path | None, trials: int | None, max_cost: float | None
) -> RunConfig:
    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        config = load_config_file(config_path)
    else:
        config = load_config()

    overrides: dict[str, object] = {}
    if trials is not None:
        overrides["trials"] = trials
    if max_cost is not None:
        overrides["max_cost"] = max_cost
    return config.model_copy(update=overrides) if overrides else config


async def _run_async(
    patterns: list[str],
    *,
    config_path: Path | None,
    grep: str | None,
    trials: int | None,
    max_cost: float | None,
    reporter: str | None,
    verbose: bool,
    dry_run: bool,
) -> None:
    """Async implementation of the run command."""
    # 1. Config
    try:
        config = _load_run_config(config_path, trials, max_cost)
    except ConfigurationError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    reporter_name = reporter or (config.reporters[0] if config.reporters else "console")
    if reporter_name not in ("console", "json"):
        console.print(f"[bold red]Error:[/bold red] Unknown reporter '{reporter_name}'. Use console or json.")
        raise typer.Exit(code=1)

    # 2. Discover
    include = [pattern_to_glob(p) for p in patterns] if patterns else config.include
    files = discover_eval_files(Path.cwd(), include=include, exclude=config.exclude)
    if grep:
        files = filter_by_pattern(files, grep)

    if not files:
        console.print("No eval files found.")
        raise typer.Exit(code=1)

    if dry_run:
        console.print("Would run the following eval files:")
        for path in files:
            console.print(f"  - {path}")
        return

    # 3. Providers
    try:
        providers = create_providers_from_config(config)
    except (ImportError, ConfigurationError) as exc:
        console.print(f"[bold red]Provider error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if not providers:
        console.print(
            "[bold red]No AI providers configured.[/bold red] "
            "Set ANTHROPIC_API_KEY or OPENAI_API_KEY environment variables."
        )
        raise typer.Exit(code=1)

    # 4. Load suites
    try:
        suites = load_eval_files(files)
    except Exception as exc:
        console.print(f"[bold red]Failed to load eval files:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if not suites:
        console.print("No eval suites found in the discovered files.")
        raise typer.Exit(code=1)

    # 5. Run and report
    if reporter_name == "json":
        result = await run_suites(suites, providers, config, RunnerHooks())
        output_json(result)
    else:
        console_reporter = ConsoleReporter(Console(), verbose=verbose)
        console_reporter.on_start()
        result = await run_suites(suites, providers, config, console_reporter.hooks())
        console_reporter.on_end(result)

    if not result.success:
        raise typer.Exit(code=1)
