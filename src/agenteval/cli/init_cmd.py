"""agenteval init: scaffold a config file and an example eval."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from agenteval.scaffold.init import ProjectExistsError, scaffold_project

console = Console()
err_console = Console(stderr=True)


def init(
    directory: Path = typer.Argument(Path("."), help="Project directory (created if missing)"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace files that already exist"),
) -> None:
    """Create agenteval.yaml and evals/hello.eval.py in DIRECTORY."""
    try:
        created = scaffold_project(directory, force=force)
    except ProjectExistsError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {exc}")
        err_console.print("Pass --force to overwrite them.")
        raise typer.Exit(code=1)

    console.print(f"[bold green]Initialized agenteval project in {directory.resolve()}[/bold green]")
    for path in created:
        console.print(f"  [green]+[/green] {path}")
    console.print()
    console.print("Next: export ANTHROPIC_API_KEY=... and run [bold]agenteval run[/bold]")
