"""Publish orchestration.

Drives one publish session through

    READY -> BUILDING_LOCALLY -> CREATING_OR_UPDATING_TARGET -> DEPLOYING -> COMPLETE

with any failure rolling back to READY. Only one session runs at a time:
``publish()`` refuses to start while the live session is running, and the
running flag is cleared only when the pipeline coroutine itself completes.

Collaborators are synchronous; the three slow calls (build, directory
listing, upload) run in worker threads via ``asyncio.to_thread`` and their
progress callbacks are marshalled back onto the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any

from pubflow.core.config import DEFAULT_BASE_NAME, DEFAULT_BUILDS_DIR, DEFAULT_LIST_LIMIT
from pubflow.core.result import Err, Ok, Result
from pubflow.publish.errors import PublishError, precondition_error
from pubflow.publish.fsm import StepOutcome, advance, finish, run_steps
from pubflow.publish.model import (
    PublishedRecord,
    PublishSession,
    PublishStep,
    PublishTarget,
    TargetOptions,
)
from pubflow.publish.naming import sanitize_name
from pubflow.publish.ports import (
    BuildProvider,
    CredentialProvider,
    IdentityProvider,
    ProgressCallback,
    PublisherFactory,
    RepositoryDirectory,
)
from pubflow.publish.store import PublishStore
from pubflow.publish.targets import build_options, choose

__all__ = ["PublishOrchestrator", "PublishSettings", "SessionListener"]

logger = logging.getLogger(__name__)

SessionListener = Callable[[PublishSession], None]
PublishOutcome = Result[PublishSession, PublishError]
PublishTask = asyncio.Task[PublishOutcome]


@dataclass(frozen=True, slots=True)
class PublishSettings:
    project_root: Path
    project_name: str
    domain: str
    builds_dir: str = DEFAULT_BUILDS_DIR
    list_limit: int = DEFAULT_LIST_LIMIT


def _busy() -> PublishError:
    return PublishError(
        kind="busy",
        message="a publish is already in progress",
        hint="Wait for the current publish to finish",
    )


class PublishOrchestrator:
    def __init__(
        self,
        *,
        settings: PublishSettings,
        identity: IdentityProvider,
        credentials: CredentialProvider,
        builder: BuildProvider,
        directory: RepositoryDirectory,
        publisher_factory: PublisherFactory,
        store: PublishStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._settings = settings
        self._identity = identity
        self._credentials = credentials
        self._builder = builder
        self._directory = directory
        self._publisher_factory = publisher_factory
        self._store = store
        self._clock = clock
        self._listeners: list[SessionListener] = []
        self._task: PublishTask | None = None
        self._session = self._fresh_session(name=self.base_name, is_new=True)

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def session(self) -> PublishSession:
        return self._session

    @property
    def is_running(self) -> bool:
        return self._session.is_running

    @property
    def base_name(self) -> str:
        return sanitize_name(self._settings.project_name) or DEFAULT_BASE_NAME

    @property
    def creator_handle(self) -> str:
        return self._identity.creator_handle or ""

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called with every new session; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, session: PublishSession) -> None:
        self._session = session
        for listener in tuple(self._listeners):
            listener(session)

    def _target(self, name: str, *, is_new: bool) -> PublishTarget:
        return PublishTarget.create(
            name=name,
            is_new=is_new,
            creator_handle=self.creator_handle,
            domain=self._settings.domain,
        )

    def _fresh_session(self, *, name: str, is_new: bool) -> PublishSession:
        return PublishSession(
            step=PublishStep.READY,
            is_running=False,
            status_message="",
            target=self._target(name, is_new=is_new),
            project_name=name,
        )

    def restore(self) -> PublishSession:
        """Rebuild the session from the persisted record.

        A stored URL means the project was published before: the session
        starts COMPLETE and targets the stored repository for updates.
        """
        loaded = self._store.load()
        if isinstance(loaded, Err):
            logger.warning("ignoring unreadable publish state: %s", loaded.error.pretty())
            record = None
        else:
            record = loaded.value

        if record is None:
            session = self._fresh_session(name=self.base_name, is_new=True)
        else:
            name = record.last_project_name or self.base_name
            session = replace(
                self._fresh_session(name=name, is_new=False),
                step=PublishStep.COMPLETE,
                result_url=record.published_url,
                built=True,
                target_ready=True,
                deployed=True,
            )
        self._set(session)
        return session

    # ------------------------------------------------------------------
    # Preconditions and target selection
    # ------------------------------------------------------------------

    def check_preconditions(self) -> Result[None, PublishError]:
        if not self._identity.is_authenticated:
            return Err(precondition_error("not_authenticated"))
        if not self._identity.creator_handle:
            return Err(precondition_error("missing_creator_handle"))
        if not self._credentials.has_valid_credential:
            return Err(precondition_error("missing_credential"))
        return Ok(None)

    async def load_options(self, base_name: str | None = None) -> TargetOptions:
        """List related repositories and build the selectable options.

        A directory failure falls back to a single create-new option; the
        failure is kept on ``TargetOptions.directory_error``.
        """
        base = sanitize_name(base_name or "") or self.base_name
        try:
            return await asyncio.to_thread(self._resolve_options, base)
        except Exception as e:
            logger.exception("repository lookup crashed")
            return build_options(
                base_name=base,
                candidates=(),
                unique_name=base,
                creator_handle=self.creator_handle,
                domain=self._settings.domain,
                directory_error=str(e) or type(e).__name__,
            )

    def _resolve_options(self, base: str) -> TargetOptions:
        listed = self._directory.list_related(base, self._settings.list_limit)
        unique = self._directory.generate_unique_name(base)
        if isinstance(listed, Err):
            logger.warning("failed to load repositories: %s", listed.error.pretty())
            return build_options(
                base_name=base,
                candidates=(),
                unique_name=unique,
                creator_handle=self.creator_handle,
                domain=self._settings.domain,
                directory_error=listed.error.message,
            )
        return build_options(
            base_name=base,
            candidates=listed.value,
            unique_name=unique,
            creator_handle=self.creator_handle,
            domain=self._settings.domain,
        )

    def choose(self, options: TargetOptions, index: int) -> Result[PublishSession, PublishError]:
        if self.is_running:
            return Err(_busy())
        chosen = choose(
            self._session,
            options,
            index,
            creator_handle=self.creator_handle,
            domain=self._settings.domain,
        )
        if isinstance(chosen, Ok):
            self._set(chosen.value)
        return chosen

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def publish(self) -> PublishOutcome:
        """Run the pipeline for the current target.

        Returns the final session on success. On failure the live session is
        back in READY and the error is returned; nothing is raised.
        """
        if self.is_running:
            return Err(_busy())

        gate = self.check_preconditions()
        if isinstance(gate, Err):
            return gate

        start = replace(
            self._session,
            step=PublishStep.BUILDING_LOCALLY,
            is_running=True,
            status_message="Building project locally...",
            result_url=None,
            last_error=None,
            built=False,
            target_ready=False,
            deployed=False,
            artifact_path=None,
        )
        self._set(start)
        logger.info(
            "publishing %s (%s)", start.target.repository_name or start.project_name, start.target.intent
        )

        try:
            result = await run_steps(
                initial_state=start,
                get_step=lambda s: s.step,
                handlers={
                    PublishStep.BUILDING_LOCALLY: self._build_step,
                    PublishStep.CREATING_OR_UPDATING_TARGET: self._target_step,
                    PublishStep.DEPLOYING: self._deploy_step,
                },
                on_transition=self._set,
            )
        except Exception as e:
            logger.exception("publish pipeline crashed")
            result = Err(PublishError(kind="internal", message=str(e) or type(e).__name__))

        if isinstance(result, Err):
            logger.error("publishing failed: %s", result.error.message)
            self._set(self._session.rolled_back(result.error.message))
            return result

        done = replace(self._session, is_running=False)
        self._set(done)
        return Ok(done)

    async def update(self) -> PublishOutcome:
        """Republish to the persisted target without creating a new one."""
        if self.is_running:
            return Err(_busy())

        # The session is only retargeted once the pipeline is allowed to start.
        gate = self.check_preconditions()
        if isinstance(gate, Err):
            return gate

        loaded = self._store.load()
        if isinstance(loaded, Err):
            return loaded
        if loaded.value is None:
            return Err(
                PublishError(
                    kind="invalid_input",
                    message="nothing has been published from this project yet",
                    hint="Run: pubflow publish",
                )
            )

        name = loaded.value.last_project_name or self._session.target.repository_name
        self._set(
            replace(
                self._session,
                step=PublishStep.READY,
                target=self._target(name, is_new=False),
                project_name=name,
            )
        )
        return await self.publish()

    def reset(self) -> Result[PublishSession, PublishError]:
        """Forget the last publish; the next publish creates a new target."""
        if self.is_running:
            return Err(_busy())

        cleared = self._store.clear()
        if isinstance(cleared, Err):
            return cleared

        session = self._fresh_session(name=self.base_name, is_new=True)
        self._set(session)
        logger.info("publish state reset")
        return Ok(session)

    def start_publish(self) -> Result[PublishTask, PublishError]:
        """Launch publish() as a supervised task on the running loop.

        While the task is pending, further start_* calls are rejected.
        """
        return self._launch(self.publish)

    def start_update(self) -> Result[PublishTask, PublishError]:
        return self._launch(self.update)

    def _launch(
        self, run: Callable[[], Coroutine[Any, Any, PublishOutcome]]
    ) -> Result[PublishTask, PublishError]:
        if self.is_running or (self._task is not None and not self._task.done()):
            return Err(_busy())
        task = asyncio.get_running_loop().create_task(run())
        self._task = task
        return Ok(task)

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def _progress_callback(self) -> ProgressCallback:
        loop = asyncio.get_running_loop()

        def on_progress(status: str) -> None:
            loop.call_soon_threadsafe(self._apply_status, status)

        return on_progress

    def _apply_status(self, status: str) -> None:
        if self._session.is_running:
            self._set(replace(self._session, status_message=status))

    def _output_path(self) -> Path:
        stamp = self._clock().strftime("%Y%m%d_%H%M%S")
        return self._settings.project_root / self._settings.builds_dir / f"WebGLBuild_{stamp}"

    async def _build_step(
        self, session: PublishSession
    ) -> Result[StepOutcome[PublishSession], PublishError]:
        output = self._output_path()
        built = await asyncio.to_thread(self._builder.build, output, self._progress_callback())
        if isinstance(built, Err):
            return built

        # Progress updates replaced the session while the build ran.
        return Ok(
            advance(
                replace(
                    self._session,
                    step=PublishStep.CREATING_OR_UPDATING_TARGET,
                    status_message="Build completed successfully",
                    built=True,
                    artifact_path=built.value.path,
                )
            )
        )

    async def _target_step(
        self, session: PublishSession
    ) -> Result[StepOutcome[PublishSession], PublishError]:
        name = (
            session.target.repository_name
            or sanitize_name(session.project_name)
            or DEFAULT_BASE_NAME
        )
        target = self._target(name, is_new=session.target.is_new)
        logger.debug("deployment intent: %s, base name: %s", target.intent, name)
        verb = "Creating" if target.is_new else "Updating"
        return Ok(
            advance(
                replace(
                    session,
                    step=PublishStep.DEPLOYING,
                    status_message=f"{verb} {name}; uploading build...",
                    target=target,
                    target_ready=True,
                )
            )
        )

    async def _deploy_step(
        self, session: PublishSession
    ) -> Result[StepOutcome[PublishSession], PublishError]:
        if session.artifact_path is None:
            return Err(PublishError(kind="internal", message="no build artifact to upload"))

        publisher = self._publisher_factory()
        try:
            uploaded = await asyncio.to_thread(
                publisher.upload,
                session.artifact_path,
                self.creator_handle,
                session.target.repository_name,
                session.target.intent,
                self._progress_callback(),
            )
        finally:
            publisher.close()

        if isinstance(uploaded, Err):
            return uploaded

        receipt = uploaded.value
        actual = sanitize_name(receipt.actual_target_name) or session.target.repository_name
        target = self._target(actual, is_new=False)
        live_url = receipt.live_url or target.display_url

        status = "Publishing completed successfully!"
        saved = self._store.save(PublishedRecord(published_url=live_url, last_project_name=actual))
        if isinstance(saved, Err):
            logger.warning("published, but state was not saved: %s", saved.error.pretty())
            status = f"Published, but state was not saved: {saved.error.message}"

        logger.info("published %s at %s", actual, live_url)
        return Ok(
            finish(
                replace(
                    self._session,
                    step=PublishStep.COMPLETE,
                    status_message=status,
                    target=target,
                    result_url=live_url,
                    deployed=True,
                )
            )
        )
