"""Command-line entry point: ``agenteval run`` and ``agenteval init``."""

from __future__ import annotations

from typing import Optional

import typer

from agenteval import __version__
from agenteval.cli.init_cmd import init
from agenteval.cli.run_cmd import run

app = typer.Typer(
    name="agenteval",
    help="Run eval suites against conversational AI agents.",
    no_args_is_help=True,
    add_completion=False,
)
app.command("run")(run)
app.command("init")(init)


def _show_version(requested: bool) -> None:
    if not requested:
        return
    typer.echo(f"agenteval {__version__}")
    raise typer.Exit()


@app.callback()
def cli(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_show_version,
        is_eager=True,
        help="Print the agenteval version and exit.",
    ),
) -> None:
    """agenteval: pass@k evals for chat models, with tool and judge assertions."""
