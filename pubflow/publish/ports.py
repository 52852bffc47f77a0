"""Collaborator interfaces consumed by the orchestrator.

All methods are synchronous and Result-returning; the orchestrator runs the
slow ones (build, directory listing, upload) in worker threads. Progress
callbacks may therefore be invoked off the event loop thread.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from pubflow.core.result import Result
from pubflow.core.structured import StrDict
from pubflow.publish.errors import PublishError
from pubflow.publish.model import BuildArtifact, RepositoryCandidate, UploadIntent, UploadReceipt

__all__ = [
    "ArtifactPublisher",
    "BuildProvider",
    "CredentialProvider",
    "IdentityProvider",
    "ProgressCallback",
    "PublisherFactory",
    "RepositoryDirectory",
]

ProgressCallback = Callable[[str], None]


@runtime_checkable
class IdentityProvider(Protocol):
    @property
    def is_authenticated(self) -> bool: ...

    @property
    def creator_handle(self) -> str | None: ...

    def id_token(self) -> str | None:
        """Bearer token for storage and function calls, None when signed out."""
        ...

    def call_function(self, name: str, payload: StrDict) -> Result[StrDict, PublishError]:
        """Invoke a named serverless function as the signed-in creator."""
        ...


@runtime_checkable
class CredentialProvider(Protocol):
    @property
    def has_valid_credential(self) -> bool: ...


class BuildProvider(Protocol):
    def build(
        self, output_path: Path, on_progress: ProgressCallback
    ) -> Result[BuildArtifact, PublishError]: ...


class RepositoryDirectory(Protocol):
    def list_related(
        self, base_name: str, limit: int
    ) -> Result[list[RepositoryCandidate], PublishError]: ...

    def generate_unique_name(self, base_name: str) -> str: ...

    def sanitize_name(self, raw: str) -> str: ...


class ArtifactPublisher(Protocol):
    def upload(
        self,
        artifact_path: Path,
        creator_handle: str,
        target_name: str,
        intent: UploadIntent,
        on_progress: ProgressCallback,
    ) -> Result[UploadReceipt, PublishError]: ...

    def close(self) -> None:
        """Release transport resources. Called after every upload."""
        ...


PublisherFactory = Callable[[], ArtifactPublisher]
