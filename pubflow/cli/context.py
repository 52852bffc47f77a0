from __future__ import annotations

from dataclasses import dataclass

import typer

from pubflow.core.config import Config, load_config_or_default
from pubflow.core.errors import ErrorCode
from pubflow.core.project import Project, detect_project
from pubflow.core.result import Err
from pubflow.infra.command_build import CommandBuildProvider, PrebuiltBuildProvider
from pubflow.infra.gh_credentials import GhCredentialProvider
from pubflow.infra.gh_directory import GhRepositoryDirectory
from pubflow.infra.http import RealHttpClient
from pubflow.infra.identity import ConfigIdentityProvider
from pubflow.infra.storage_publisher import StoragePublisher
from pubflow.infra.timeouts import FUNCTION_TIMEOUT_SECONDS, UPLOAD_TIMEOUT_SECONDS
from pubflow.output.console import ConsoleProtocol, RichConsole
from pubflow.publish.orchestrator import PublishOrchestrator, PublishSettings
from pubflow.publish.ports import ArtifactPublisher, BuildProvider
from pubflow.publish.store import PublishStore


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: Config
    console: ConsoleProtocol


def build_context() -> CLIContext:
    project_result = detect_project()
    if isinstance(project_result, Err):
        typer.echo(f"error: {project_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    project = project_result.value
    config_result = load_config_or_default(project.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(
        project=project,
        config=config_result.value,
        console=RichConsole(),
    )


def build_provider(ctx: CLIContext) -> BuildProvider:
    build = ctx.config.build
    if build.prebuilt:
        return PrebuiltBuildProvider(source=ctx.project.root / build.prebuilt)
    return CommandBuildProvider(project_root=ctx.project.root, command=build.command)


def build_orchestrator(ctx: CLIContext) -> PublishOrchestrator:
    """Wire the production collaborators for the current project."""
    config = ctx.config
    root = ctx.project.root

    identity = ConfigIdentityProvider(
        handle=config.creator.handle,
        functions_url=config.storage.functions_url,
        http=RealHttpClient(timeout=FUNCTION_TIMEOUT_SECONDS),
    )

    def publisher_factory() -> ArtifactPublisher:
        return StoragePublisher(
            bucket=config.storage.effective_bucket,
            identity=identity,
            http=RealHttpClient(timeout=UPLOAD_TIMEOUT_SECONDS),
        )

    return PublishOrchestrator(
        settings=PublishSettings(
            project_root=root,
            project_name=config.project.name or ctx.project.default_name,
            domain=config.hosting.domain,
            builds_dir=config.project.builds_dir,
            list_limit=config.hosting.list_limit,
        ),
        identity=identity,
        credentials=GhCredentialProvider(cwd=root),
        builder=build_provider(ctx),
        directory=GhRepositoryDirectory(cwd=root),
        publisher_factory=publisher_factory,
        store=PublishStore(ctx.project.prefs_path),
    )
