from __future__ import annotations

from pubflow.cli.commands._helpers import print_summary, run_pipeline
from pubflow.cli.context import build_context, build_orchestrator


def update() -> None:
    """Rebuild and republish to the last published target."""
    ctx = build_context()
    orchestrator = build_orchestrator(ctx)
    session = orchestrator.restore()

    if session.result_url:
        ctx.console.print(f"updating {session.target.repository_name} ({session.result_url})")

    done = run_pipeline(ctx, orchestrator, orchestrator.start_update)
    print_summary(ctx, done)
