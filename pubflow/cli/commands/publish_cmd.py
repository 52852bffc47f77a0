from __future__ import annotations

import asyncio

import typer

from pubflow.cli.commands._helpers import exit_on_error, print_summary, run_pipeline
from pubflow.cli.commands.options import print_options
from pubflow.cli.context import CLIContext, build_context, build_orchestrator
from pubflow.core.errors import ErrorCode
from pubflow.publish.model import TargetOptions


def publish(
    name: str | None = typer.Option(
        None, "--name", help="Base name to match (defaults to the project name)."
    ),
    choice: int | None = typer.Option(
        None, "--choice", min=1, help="Pick target option N without prompting."
    ),
    new: bool = typer.Option(False, "--new", help="Always create a new target."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Build the project and publish it to a hosted target."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    orchestrator.restore()

    exit_on_error(orchestrator.check_preconditions(), ctx)

    target_options = asyncio.run(orchestrator.load_options(name))
    print_options(ctx, target_options)

    index = _select(ctx, target_options, choice=choice, new=new, yes=yes)
    session = exit_on_error(orchestrator.choose(target_options, index), ctx)

    if not yes and not typer.confirm(f"Publish to {session.target.display_url}?", default=True):
        ctx.console.print("cancelled")
        raise typer.Exit(code=int(ErrorCode.OK))

    done = run_pipeline(ctx, orchestrator, orchestrator.start_publish)
    print_summary(ctx, done)


def _select(
    ctx: CLIContext,
    target_options: TargetOptions,
    *,
    choice: int | None,
    new: bool,
    yes: bool,
) -> int:
    if choice is not None:
        return choice - 1
    if new:
        # The create-new option is always last.
        return len(target_options.options) - 1
    if yes or len(target_options.options) == 1:
        return target_options.default_index

    picked: int = typer.prompt(
        "Select target",
        default=target_options.default_index + 1,
        type=int,
    )
    return picked - 1
