from __future__ import annotations

from pubflow.cli.commands._helpers import exit_with_code
from pubflow.cli.context import CLIContext, build_context, build_orchestrator
from pubflow.core.errors import ErrorCode
from pubflow.core.result import Err
from pubflow.output.console import Style
from pubflow.output.errors import print_publish_error
from pubflow.publish.model import PublishSession
from pubflow.publish.orchestrator import PublishOrchestrator


def status() -> None:
    """Show prerequisites and the last published state."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    session = orchestrator.restore()

    ctx.console.print(f"project: {ctx.project.root} ({ctx.project.source})", Style.DIM)
    config_state = "found" if ctx.project.config_path.is_file() else "defaults"
    ctx.console.print(f"config: {config_state}", Style.DIM)

    ready = _print_prerequisites(ctx, orchestrator)
    _print_state(ctx, session)

    if not ready:
        exit_with_code(int(ErrorCode.ENV_ERROR))


def _print_prerequisites(ctx: CLIContext, orchestrator: PublishOrchestrator) -> bool:
    ctx.console.header("Prerequisites")
    handle = orchestrator.creator_handle or "(not set)"
    ctx.console.print(f"creator: {handle}")
    gate = orchestrator.check_preconditions()
    if isinstance(gate, Err):
        print_publish_error(gate.error, ctx.console)
        return False
    ctx.console.success("ready to publish")
    return True


def _print_state(ctx: CLIContext, session: PublishSession) -> None:
    ctx.console.header("Last publish")
    if not session.is_complete or session.result_url is None:
        ctx.console.print("nothing published yet", Style.DIM)
        ctx.console.print(f"next publish creates: {session.target.repository_name}", Style.DIM)
        return
    ctx.console.print(f"target: {session.target.repository_name}")
    ctx.console.print(f"url: {session.result_url}", Style.LINK)
