from __future__ import annotations

import os
from pathlib import Path

import typer

from pubflow import __version__
from pubflow.cli.commands.copy_cmd import copy_url
from pubflow.cli.commands.open_cmd import open_url
from pubflow.cli.commands.options import options
from pubflow.cli.commands.publish_cmd import publish
from pubflow.cli.commands.reset import reset
from pubflow.cli.commands.status import status
from pubflow.cli.commands.update_cmd import update
from pubflow.core.errors import ErrorCode
from pubflow.output.logging import configure_logging


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(status)
app.command()(options)
app.command()(publish)
app.command()(update)
app.command()(reset)
app.command("open")(open_url)
app.command("copy")(copy_url)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project root (overrides auto detection)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    configure_logging(verbose=verbose)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --project '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ["PUBFLOW_PROJECT"] = str(root)


def main() -> None:
    app()
