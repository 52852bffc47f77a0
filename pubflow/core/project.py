"""Project detection and paths.

A project is the local directory being published. It is identified by a
``pubflow.toml`` file; when none is found the current directory is used so
that a bare build folder can still be published with defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .config import CONFIG_FILE_NAME
from .result import Err, Ok, Result

__all__ = [
    "Project",
    "ProjectError",
    "ProjectSource",
    "detect_project",
    "find_project_upward",
    "is_project_root",
]

ProjectSource = Literal["env", "marker", "cwd"]


@dataclass(frozen=True, slots=True)
class ProjectError:
    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Project:
    """A detected project.

    The root may contain:
    - pubflow.toml (optional)
    - .pubflow/ local state (persisted publish record)
    - the builds directory (timestamped build outputs)
    """

    root: Path
    source: ProjectSource = "marker"

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @property
    def state_dir(self) -> Path:
        """Local state directory (.pubflow/), should be gitignored."""
        return self.root / ".pubflow"

    @property
    def prefs_path(self) -> Path:
        """Persisted publish record (.pubflow/prefs.json)."""
        return self.state_dir / "prefs.json"

    @property
    def default_name(self) -> str:
        return self.root.name

    def __str__(self) -> str:
        return str(self.root)


def is_project_root(path: Path) -> bool:
    return (path / CONFIG_FILE_NAME).is_file()


def find_project_upward(start: Path) -> Path | None:
    """Search upward from start for a directory holding pubflow.toml."""
    for parent in (start, *start.parents):
        if is_project_root(parent):
            return parent
    return None


def detect_project(
    *,
    start_dir: Path | None = None,
    env_var: str = "PUBFLOW_PROJECT",
) -> Result[Project, ProjectError]:
    """Detect the project root.

    Detection order:
    1. $PUBFLOW_PROJECT (must be an existing directory)
    2. First directory upward from start_dir (or cwd) with pubflow.toml
    3. start_dir (or cwd) itself
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir():
            return Ok(Project(root=env_path, source="env"))
        return Err(
            ProjectError(
                message=f"${env_var} is set to '{env_value}' but it is not a directory",
                searched_from=None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    if not search_start.is_dir():
        return Err(
            ProjectError(
                message=f"Not a directory: {search_start}",
                searched_from=search_start,
            )
        )

    found = find_project_upward(search_start)
    if found is not None:
        return Ok(Project(root=found, source="marker"))

    return Ok(Project(root=search_start, source="cwd"))
