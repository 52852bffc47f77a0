from __future__ import annotations

from pubflow.cli.commands._helpers import exit_with_code
from pubflow.cli.context import build_context, build_orchestrator
from pubflow.core.errors import ErrorCode
from pubflow.output.console import Style
from pubflow.platform.clipboard import copy_to_clipboard


def copy_url() -> None:
    """Copy the published URL to the clipboard."""
    ctx = build_context()
    session = build_orchestrator(ctx).restore()

    if session.result_url is None:
        ctx.console.error("nothing has been published from this project yet")
        ctx.console.print("hint: Run: pubflow publish", Style.DIM)
        exit_with_code(int(ErrorCode.USER_ERROR))

    ctx.console.print(session.result_url, Style.LINK)
    if not copy_to_clipboard(session.result_url):
        ctx.console.error("no clipboard tool available")
        ctx.console.print("hint: install wl-copy, xclip or xsel", Style.DIM)
        exit_with_code(int(ErrorCode.ENV_ERROR))

    ctx.console.success("Copied to clipboard")
