"""BuildProviders: run a configured build command, or reuse a prebuilt folder."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

from pubflow.core.result import Err, Ok, Result
from pubflow.platform.process import stream
from pubflow.publish.errors import PublishError
from pubflow.publish.model import BuildArtifact
from pubflow.publish.ports import ProgressCallback

# A web-playable build always has an entry page.
ENTRY_FILE = "index.html"


def _verify_output(output_path: Path) -> Result[BuildArtifact, PublishError]:
    if not (output_path / ENTRY_FILE).is_file():
        return Err(
            PublishError(
                kind="build",
                message=f"build output missing {ENTRY_FILE}: {output_path}",
                hint="Check that the build targets WebGL",
            )
        )
    return Ok(BuildArtifact(path=output_path))


class CommandBuildProvider:
    """Runs ``command`` with ``{project}`` and ``{output}`` substituted.

    Each line the command prints is forwarded as progress.
    """

    def __init__(self, *, project_root: Path, command: Sequence[str]) -> None:
        self._project_root = project_root
        self._command = tuple(command)

    def validate(self) -> Result[None, PublishError]:
        if not self._command:
            return Err(
                PublishError(
                    kind="build",
                    message="build requirements not met: no build command configured",
                    hint="Set [build] command or [build] prebuilt in pubflow.toml",
                )
            )
        if shutil.which(self._command[0]) is None and not Path(self._command[0]).is_file():
            return Err(
                PublishError(
                    kind="build",
                    message=f"build requirements not met: {self._command[0]} not found",
                )
            )
        return Ok(None)

    def build(
        self, output_path: Path, on_progress: ProgressCallback
    ) -> Result[BuildArtifact, PublishError]:
        valid = self.validate()
        if isinstance(valid, Err):
            return valid

        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(PublishError(kind="build", message=f"cannot create {output_path}: {e}"))

        cmd = [
            arg.replace("{project}", str(self._project_root)).replace("{output}", str(output_path))
            for arg in self._command
        ]
        on_progress(f"Building into {output_path.name}...")
        ran = stream(cmd, cwd=self._project_root, on_line=on_progress)
        if isinstance(ran, Err):
            error = ran.error
            return Err(
                PublishError(
                    kind="build",
                    message=f"local build failed (exit {error.returncode})",
                    hint=error.stderr.strip().splitlines()[-1] if error.stderr.strip() else None,
                )
            )
        return _verify_output(output_path)


class PrebuiltBuildProvider:
    """Copies a build produced outside pubflow into the output path."""

    def __init__(self, *, source: Path) -> None:
        self._source = source

    def build(
        self, output_path: Path, on_progress: ProgressCallback
    ) -> Result[BuildArtifact, PublishError]:
        if not self._source.is_dir():
            return Err(
                PublishError(
                    kind="build",
                    message=f"prebuilt build not found: {self._source}",
                    hint="Set [build] prebuilt to an existing directory",
                )
            )

        on_progress(f"Copying prebuilt build from {self._source}...")
        try:
            shutil.copytree(self._source, output_path, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            return Err(PublishError(kind="build", message=f"failed to copy prebuilt build: {e}"))
        return _verify_output(output_path)
