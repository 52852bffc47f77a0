from __future__ import annotations

from pathlib import Path

from pubflow.core.result import Err, Ok, Result
from pubflow.infra.gh import ensure_gh_auth, ensure_gh_available
from pubflow.publish.errors import PublishError


class GhCredentialProvider:
    """Hosting credential gate: an installed and signed-in GitHub CLI.

    The check shells out, so the outcome is cached for the provider's life.
    """

    def __init__(self, *, cwd: Path) -> None:
        self._cwd = cwd
        self._checked: Result[None, PublishError] | None = None

    def check(self) -> Result[None, PublishError]:
        if self._checked is None:
            available = ensure_gh_available()
            if isinstance(available, Err):
                self._checked = available
            else:
                self._checked = ensure_gh_auth(cwd=self._cwd)
        return self._checked

    @property
    def has_valid_credential(self) -> bool:
        return isinstance(self.check(), Ok)
