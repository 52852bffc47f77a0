from __future__ import annotations

import typer

from pubflow.cli.commands._helpers import exit_with_code
from pubflow.cli.context import build_context, build_orchestrator
from pubflow.core.errors import ErrorCode
from pubflow.output.console import Style


def open_url() -> None:
    """Open the published build in a browser."""
    ctx = build_context()
    session = build_orchestrator(ctx).restore()

    if session.result_url is None:
        ctx.console.error("nothing has been published from this project yet")
        ctx.console.print("hint: Run: pubflow publish", Style.DIM)
        exit_with_code(int(ErrorCode.USER_ERROR))

    ctx.console.print(session.result_url, Style.LINK)
    typer.launch(session.result_url)
