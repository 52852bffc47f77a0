"""Publish orchestration: session model, target resolution, persisted state.

Layout:
- model / errors: value types shared by every layer
- naming / targets: pure rules for names and target options
- ports: collaborator interfaces (build, directory, publisher, identity)
- store: the persisted last-published record
- fsm / orchestrator: the asynchronous publish pipeline
"""

from .errors import PublishError
from .model import (
    PublishSession,
    PublishStep,
    PublishTarget,
    RepositoryCandidate,
    TargetOption,
    TargetOptions,
)
from .orchestrator import PublishOrchestrator, PublishSettings
from .store import PublishStore

__all__ = [
    "PublishError",
    "PublishOrchestrator",
    "PublishSession",
    "PublishSettings",
    "PublishStep",
    "PublishStore",
    "PublishTarget",
    "RepositoryCandidate",
    "TargetOption",
    "TargetOptions",
]
