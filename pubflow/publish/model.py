from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal

from pubflow.publish.naming import display_url, sanitize_name

UploadIntent = Literal["create_new", "update_existing"]
OptionKind = Literal["update_existing", "create_new"]


class PublishStep(Enum):
    """Pipeline states. READY is both the initial and the post-failure state."""

    READY = "ready"
    BUILDING_LOCALLY = "building_locally"
    CREATING_OR_UPDATING_TARGET = "creating_or_updating_target"
    DEPLOYING = "deploying"
    COMPLETE = "complete"

    def __str__(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True, slots=True)
class PublishTarget:
    """Where output will be published.

    Build through ``PublishTarget.create`` so the name is always sanitized.
    """

    repository_name: str
    is_new: bool
    display_url: str

    @classmethod
    def create(
        cls, *, name: str, is_new: bool, creator_handle: str, domain: str
    ) -> PublishTarget:
        clean = sanitize_name(name)
        return cls(
            repository_name=clean,
            is_new=is_new,
            display_url=display_url(creator_handle, domain, clean),
        )

    @property
    def intent(self) -> UploadIntent:
        return "create_new" if self.is_new else "update_existing"


@dataclass(frozen=True, slots=True)
class RepositoryCandidate:
    """Read-only view of an existing hosted repository."""

    name: str
    is_recognized_project_type: bool
    live_url: str | None
    last_updated: datetime | None


@dataclass(frozen=True, slots=True)
class TargetOption:
    kind: OptionKind
    repository_name: str
    display_name: str
    description: str
    display_url: str
    live_url: str | None = None
    last_updated: datetime | None = None
    is_recognized_project_type: bool = False

    @property
    def is_new(self) -> bool:
        return self.kind == "create_new"


@dataclass(frozen=True, slots=True)
class TargetOptions:
    """Selectable targets; the create-new option is always last.

    ``directory_error`` carries the listing failure message when the
    options fell back to create-new only.
    """

    options: tuple[TargetOption, ...]
    default_index: int = 0
    directory_error: str | None = None

    @property
    def default(self) -> TargetOption:
        return self.options[self.default_index]


@dataclass(frozen=True, slots=True)
class BuildArtifact:
    path: Path


@dataclass(frozen=True, slots=True)
class UploadReceipt:
    actual_target_name: str
    live_url: str


@dataclass(frozen=True, slots=True)
class PublishedRecord:
    """Persisted outcome of the last successful publish."""

    published_url: str
    last_project_name: str | None


@dataclass(frozen=True, slots=True)
class PublishSession:
    """Mutable state of one publish attempt, as an immutable value.

    Every transition produces a new session via ``dataclasses.replace``.
    ``project_name`` is the working base name; choosing an "update" option
    overrides it with the selected repository name.
    """

    step: PublishStep
    is_running: bool
    status_message: str
    target: PublishTarget
    project_name: str
    result_url: str | None = None
    last_error: str | None = None
    built: bool = False
    target_ready: bool = False
    deployed: bool = False
    artifact_path: Path | None = None

    @property
    def is_complete(self) -> bool:
        return self.step == PublishStep.COMPLETE

    def rolled_back(self, message: str) -> PublishSession:
        """Failure transition: back to READY with no step marked done."""
        return replace(
            self,
            step=PublishStep.READY,
            is_running=False,
            status_message=f"Publishing failed: {message}",
            result_url=None,
            last_error=message,
            built=False,
            target_ready=False,
            deployed=False,
        )
