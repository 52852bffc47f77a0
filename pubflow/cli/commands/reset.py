from __future__ import annotations

import typer

from pubflow.cli.commands._helpers import exit_on_error
from pubflow.cli.context import build_context, build_orchestrator
from pubflow.core.errors import ErrorCode


def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Forget the last publish so the next one creates a new target."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    session = orchestrator.restore()

    if session.result_url:
        ctx.console.print(f"last published: {session.result_url}")
    if not yes and not typer.confirm("Reset publish state?", default=False):
        ctx.console.print("cancelled")
        raise typer.Exit(code=int(ErrorCode.OK))

    fresh = exit_on_error(orchestrator.reset(), ctx)
    ctx.console.success(f"publish state reset; next publish creates {fresh.target.repository_name}")
