"""RepositoryDirectory backed by the signed-in GitHub account."""

from __future__ import annotations

import logging
from pathlib import Path

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import as_obj_list, as_str_dict, get_bool, get_datetime, get_str
from pubflow.infra.gh import current_user, gh_api_json, is_not_found
from pubflow.infra.timeouts import UNIQUE_NAME_MAX_PROBES
from pubflow.publish.errors import PublishError
from pubflow.publish.model import RepositoryCandidate
from pubflow.publish.naming import is_related, sanitize_name

logger = logging.getLogger(__name__)

# Unity WebGL output keeps its loader and data files in Build/.
_PROJECT_MARKER_PATH = "Build"


class GhRepositoryDirectory:
    def __init__(self, *, cwd: Path) -> None:
        self._cwd = cwd
        self._login: str | None = None

    def _owner(self) -> Result[str, PublishError]:
        if self._login is not None:
            return Ok(self._login)
        viewer = current_user(cwd=self._cwd)
        if isinstance(viewer, Err):
            return viewer
        self._login = viewer.value.login
        return Ok(self._login)

    def sanitize_name(self, raw: str) -> str:
        return sanitize_name(raw)

    def list_related(
        self, base_name: str, limit: int
    ) -> Result[list[RepositoryCandidate], PublishError]:
        """Recently updated repositories of the viewer that relate to base_name.

        Each match is probed for a WebGL build folder and, when Pages is
        enabled, for its live URL.
        """
        owner = self._owner()
        if isinstance(owner, Err):
            return owner

        listed = gh_api_json(
            cwd=self._cwd,
            endpoint=f"user/repos?per_page={limit}&sort=updated&affiliation=owner",
        )
        if isinstance(listed, Err):
            return listed

        raw = as_obj_list(listed.value)
        if raw is None:
            return Err(PublishError(kind="directory", message="unexpected repositories payload"))

        out: list[RepositoryCandidate] = []
        for item in raw:
            d = as_str_dict(item)
            if d is None:
                continue
            name = get_str(d, "name")
            if name is None or not is_related(base_name, name):
                continue

            live_url: str | None = None
            if get_bool(d, "has_pages"):
                live_url = self._pages_url(owner.value, name)

            out.append(
                RepositoryCandidate(
                    name=name,
                    is_recognized_project_type=self._has_build_folder(owner.value, name),
                    live_url=live_url,
                    last_updated=get_datetime(d, "updated_at"),
                )
            )
        return Ok(out)

    def _pages_url(self, owner: str, name: str) -> str | None:
        result = gh_api_json(cwd=self._cwd, endpoint=f"repos/{owner}/{name}/pages")
        if isinstance(result, Err):
            logger.debug("no pages info for %s/%s: %s", owner, name, result.error.pretty())
            return None
        data = as_str_dict(result.value)
        if data is None:
            return None
        return get_str(data, "html_url")

    def _has_build_folder(self, owner: str, name: str) -> bool:
        result = gh_api_json(
            cwd=self._cwd, endpoint=f"repos/{owner}/{name}/contents/{_PROJECT_MARKER_PATH}"
        )
        if isinstance(result, Err):
            return False
        return as_obj_list(result.value) is not None

    def _exists(self, owner: str, name: str) -> Result[bool, PublishError]:
        result = gh_api_json(cwd=self._cwd, endpoint=f"repos/{owner}/{name}")
        if isinstance(result, Ok):
            return Ok(True)
        if is_not_found(result.error):
            return Ok(False)
        return result

    def generate_unique_name(self, base_name: str) -> str:
        """First free name of base, base-1, base-2, ...

        Falls back to the sanitized base when GitHub cannot be queried; the
        deploy function disambiguates on its side too.
        """
        base = sanitize_name(base_name)
        owner = self._owner()
        if isinstance(owner, Err):
            logger.warning("cannot check name availability: %s", owner.error.pretty())
            return base

        candidate = base
        for n in range(UNIQUE_NAME_MAX_PROBES):
            candidate = base if n == 0 else f"{base}-{n}"
            exists = self._exists(owner.value, candidate)
            if isinstance(exists, Err):
                logger.warning("cannot check name availability: %s", exists.error.pretty())
                return candidate
            if not exists.value:
                return candidate
        return candidate
