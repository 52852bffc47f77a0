"""Target resolution: turn a directory listing into selectable options."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from pubflow.core.result import Err, Ok, Result
from pubflow.publish.errors import PublishError
from pubflow.publish.model import (
    PublishSession,
    PublishTarget,
    RepositoryCandidate,
    TargetOption,
    TargetOptions,
)
from pubflow.publish.naming import display_url, is_related, sanitize_name


def update_option(
    candidate: RepositoryCandidate, *, creator_handle: str, domain: str
) -> TargetOption:
    return TargetOption(
        kind="update_existing",
        repository_name=candidate.name,
        display_name=f'Update "{candidate.name}"',
        description="WebGL project" if candidate.is_recognized_project_type else "Repository",
        display_url=display_url(creator_handle, domain, candidate.name),
        live_url=candidate.live_url,
        last_updated=candidate.last_updated,
        is_recognized_project_type=candidate.is_recognized_project_type,
    )


def create_option(unique_name: str, *, creator_handle: str, domain: str) -> TargetOption:
    name = sanitize_name(unique_name)
    return TargetOption(
        kind="create_new",
        repository_name=name,
        display_name=f'Create New "{name}"',
        description="New WebGL project",
        display_url=display_url(creator_handle, domain, name),
    )


def build_options(
    *,
    base_name: str,
    candidates: Sequence[RepositoryCandidate],
    unique_name: str,
    creator_handle: str,
    domain: str,
    directory_error: str | None = None,
) -> TargetOptions:
    """One update option per related candidate, then exactly one create option.

    Candidates keep the directory's order (most recently updated first for
    GitHub), so index 0 is the most likely update target.
    """
    options: list[TargetOption] = [
        update_option(c, creator_handle=creator_handle, domain=domain)
        for c in candidates
        if is_related(base_name, c.name)
    ]
    options.append(create_option(unique_name, creator_handle=creator_handle, domain=domain))
    return TargetOptions(options=tuple(options), default_index=0, directory_error=directory_error)


def choose(
    session: PublishSession,
    options: TargetOptions,
    index: int,
    *,
    creator_handle: str,
    domain: str,
) -> Result[PublishSession, PublishError]:
    """Apply the user's choice to the session's target."""
    if not 0 <= index < len(options.options):
        return Err(
            PublishError(
                kind="invalid_input",
                message=f"no target option #{index + 1}",
                hint=f"Choose 1-{len(options.options)}",
            )
        )

    option = options.options[index]
    target = PublishTarget.create(
        name=option.repository_name,
        is_new=option.is_new,
        creator_handle=creator_handle,
        domain=domain,
    )
    project_name = session.project_name
    if not option.is_new:
        project_name = option.repository_name

    return Ok(replace(session, target=target, project_name=project_name))
