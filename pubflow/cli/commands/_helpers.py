"""Shared helpers for CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from pubflow.core.result import Err, Result
from pubflow.output.console import Style
from pubflow.output.errors import print_publish_error, publish_error_exit_code
from pubflow.publish.errors import PublishError
from pubflow.publish.model import PublishSession, PublishStep

if TYPE_CHECKING:
    from pubflow.cli.context import CLIContext
    from pubflow.publish.orchestrator import PublishOrchestrator, PublishOutcome, PublishTask

T = TypeVar("T")


def exit_on_error(result: Result[T, PublishError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the error and exit with its code.

    Replaces the common pattern:
        if isinstance(result, Err):
            print_publish_error(result.error, ctx.console)
            raise typer.Exit(code=publish_error_exit_code(result.error))
        value = result.value
    """
    if isinstance(result, Err):
        print_publish_error(result.error, ctx.console)
        raise typer.Exit(code=publish_error_exit_code(result.error))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Raise typer.Exit; typed NoReturn so callers can narrow after it."""
    raise typer.Exit(code=code)


def progress_printer(ctx: CLIContext) -> Callable[[PublishSession], None]:
    """Session listener that prints step changes and new status lines."""
    last_step: PublishStep | None = None
    last_status = ""

    def on_session(session: PublishSession) -> None:
        nonlocal last_step, last_status
        if not session.is_running or session.step == PublishStep.COMPLETE:
            return
        if session.step != last_step:
            last_step = session.step
            ctx.console.print(f"[{session.step}]", Style.BOLD)
        if session.status_message and session.status_message != last_status:
            last_status = session.status_message
            ctx.console.print(session.status_message, Style.DIM)

    return on_session


def run_pipeline(
    ctx: CLIContext,
    orchestrator: PublishOrchestrator,
    start: Callable[[], Result[PublishTask, PublishError]],
) -> PublishSession:
    """Launch a publish task with live progress and wait for it."""

    async def _run() -> PublishOutcome:
        launched = start()
        if isinstance(launched, Err):
            return launched
        return await launched.value

    unsubscribe = orchestrator.subscribe(progress_printer(ctx))
    try:
        outcome = asyncio.run(_run())
    finally:
        unsubscribe()
    return exit_on_error(outcome, ctx)


def print_summary(ctx: CLIContext, session: PublishSession) -> None:
    console = ctx.console
    console.header("Deployment complete")
    console.print(f"target: {session.target.repository_name}")
    if session.result_url:
        console.print(f"url: {session.result_url}", Style.LINK)
    if session.status_message.startswith("Published, but"):
        console.warning(session.status_message)
    else:
        console.success(session.status_message or "published")

