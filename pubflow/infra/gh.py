"""Thin wrappers around the GitHub CLI.

All hosting reads go through ``gh api`` so the user's existing ``gh auth``
session is the hosting credential; no token is handled here.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import as_str_dict, get_str
from pubflow.infra.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)
from pubflow.platform.process import ProcessError
from pubflow.platform.process import run as run_process
from pubflow.publish.errors import PublishError


@dataclass(frozen=True, slots=True)
class GhViewer:
    login: str


def is_not_found(error: PublishError) -> bool:
    return "http 404" in (error.hint or "").lower()


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "tls handshake timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    if error.returncode == -1 and "timed out" in text:
        return True
    return any(marker in text for marker in markers)


def run_gh_read(
    *,
    cwd: Path,
    cmd: list[str],
    message: str,
    hint: str | None = None,
    timeout: float = GH_TIMEOUT_SECONDS,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, PublishError]:
    """Run a read-only gh command, retrying transient failures.

    On failure the gh stderr becomes the error hint.
    """
    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=cwd, timeout=timeout)
        if isinstance(result, Ok):
            return result

        error = result.error
        if attempt < attempts - 1 and _is_transient_gh_error(error):
            sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        return Err(
            PublishError(
                kind="directory",
                message=message,
                hint=error.stderr.strip() or hint,
            )
        )

    return Err(PublishError(kind="directory", message=message, hint=hint))


def ensure_gh_available() -> Result[None, PublishError]:
    if shutil.which("gh") is None:
        return Err(
            PublishError(
                kind="precondition",
                gate="missing_credential",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, cwd: Path) -> Result[None, PublishError]:
    result = run_process(["gh", "auth", "status"], cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            PublishError(
                kind="precondition",
                gate="missing_credential",
                message="gh auth required",
                hint="Run: gh auth login",
            )
        )
    return Ok(None)


def gh_api_json(*, cwd: Path, endpoint: str) -> Result[object, PublishError]:
    result = run_gh_read(
        cwd=cwd,
        cmd=["gh", "api", endpoint],
        message=f"gh api failed: {endpoint}",
        hint=endpoint,
    )
    if isinstance(result, Err):
        return result

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            PublishError(
                kind="directory",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )

    return Ok(obj)


def current_user(*, cwd: Path) -> Result[GhViewer, PublishError]:
    result = gh_api_json(cwd=cwd, endpoint="user")
    if isinstance(result, Err):
        return result

    data = as_str_dict(result.value)
    if data is None:
        return Err(PublishError(kind="directory", message="unexpected payload: user"))

    login = get_str(data, "login")
    if login is None:
        return Err(PublishError(kind="directory", message="missing user.login"))
    return Ok(GhViewer(login=login))
