from __future__ import annotations

import asyncio

import typer

from pubflow.cli.context import CLIContext, build_context, build_orchestrator
from pubflow.output.console import Style
from pubflow.publish.model import TargetOptions


def options(
    name: str | None = typer.Option(
        None, "--name", help="Base name to match (defaults to the project name)."
    ),
) -> None:
    """List the targets a publish could go to."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    orchestrator.restore()

    target_options = asyncio.run(orchestrator.load_options(name))
    print_options(ctx, target_options)


def print_options(ctx: CLIContext, target_options: TargetOptions) -> None:
    console = ctx.console
    if target_options.directory_error:
        console.warning(f"could not list repositories: {target_options.directory_error}")

    console.header("Targets")
    for i, option in enumerate(target_options.options):
        marker = "*" if i == target_options.default_index else " "
        style = Style.BOLD if i == target_options.default_index else Style.DEFAULT
        console.print(f"{marker} {i + 1}. {option.display_name} - {option.description}", style)
        if option.live_url:
            console.print(f"     live: {option.live_url}", Style.DIM)
        if option.last_updated is not None:
            console.print(f"     updated: {option.last_updated:%Y-%m-%d %H:%M}", Style.DIM)
        if option.is_new:
            console.print(f"     url: {option.display_url}", Style.DIM)
