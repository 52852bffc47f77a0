from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from pubflow.core.result import Err, Ok, Result
from pubflow.infra import gh as gh_mod
from pubflow.infra.gh_directory import GhRepositoryDirectory
from pubflow.platform.process import ProcessError


def _not_found(endpoint: str) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "api", endpoint),
            returncode=1,
            stdout="",
            stderr="gh: Not Found (HTTP 404)",
        )
    )


class FakeGh:
    """Answers ``gh api <endpoint>`` from a table; unknown endpoints are 404."""

    def __init__(self, responses: dict[str, object]) -> None:
        self.responses = responses
        self.endpoints: list[str] = []

    def __call__(
        self, cmd: list[str], *, cwd: Path, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del cwd
        del timeout
        endpoint = cmd[-1]
        self.endpoints.append(endpoint)
        if endpoint not in self.responses:
            return _not_found(endpoint)
        response = self.responses[endpoint]
        if isinstance(response, Err):
            return response
        return Ok(json.dumps(response))


def _install(monkeypatch: pytest.MonkeyPatch, responses: dict[str, object]) -> FakeGh:
    fake = FakeGh(responses)
    monkeypatch.setattr(gh_mod, "run_process", fake)
    monkeypatch.setattr(gh_mod, "sleep", lambda _: None)
    return fake


REPOS = "user/repos?per_page=50&sort=updated&affiliation=owner"


def test_list_related_filters_and_enriches(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(
        monkeypatch,
        {
            "user": {"login": "alice"},
            REPOS: [
                {"name": "mygame-1", "has_pages": True, "updated_at": "2024-05-01T10:00:00Z"},
                {"name": "dotfiles", "has_pages": False},
                {"name": "old-mygame-archive", "has_pages": False},
                "garbage",
            ],
            "repos/alice/mygame-1/pages": {"html_url": "https://alice.github.io/mygame-1/"},
            "repos/alice/mygame-1/contents/Build": [{"name": "mygame-1.loader.js"}],
        },
    )
    directory = GhRepositoryDirectory(cwd=tmp_path)

    result = directory.list_related("MyGame", 50)

    assert isinstance(result, Ok)
    first, second = result.value
    assert first.name == "mygame-1"
    assert first.is_recognized_project_type is True
    assert first.live_url == "https://alice.github.io/mygame-1/"
    assert first.last_updated == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
    assert second.name == "old-mygame-archive"
    assert second.is_recognized_project_type is False
    assert second.live_url is None
    assert second.last_updated is None


def test_list_related_listing_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _install(monkeypatch, {"user": {"login": "alice"}})

    result = GhRepositoryDirectory(cwd=tmp_path).list_related("mygame", 50)

    assert isinstance(result, Err)
    assert result.error.kind == "directory"


def test_list_related_unexpected_payload(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(monkeypatch, {"user": {"login": "alice"}, REPOS: {"message": "nope"}})

    result = GhRepositoryDirectory(cwd=tmp_path).list_related("mygame", 50)

    assert isinstance(result, Err)
    assert result.error.message == "unexpected repositories payload"


def test_owner_is_looked_up_once(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = _install(monkeypatch, {"user": {"login": "alice"}, REPOS: []})
    directory = GhRepositoryDirectory(cwd=tmp_path)

    directory.list_related("mygame", 50)
    directory.list_related("mygame", 50)

    assert fake.endpoints.count("user") == 1


def test_generate_unique_name_probes_suffixes(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = _install(
        monkeypatch,
        {
            "user": {"login": "alice"},
            "repos/alice/mygame": {"name": "mygame"},
            "repos/alice/mygame-1": {"name": "mygame-1"},
        },
    )

    name = GhRepositoryDirectory(cwd=tmp_path).generate_unique_name("My Game")

    assert name == "my-game"
    assert fake.endpoints[-1] == "repos/alice/my-game"


def test_generate_unique_name_skips_taken(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(
        monkeypatch,
        {
            "user": {"login": "alice"},
            "repos/alice/mygame": {"name": "mygame"},
            "repos/alice/mygame-1": {"name": "mygame-1"},
        },
    )

    assert GhRepositoryDirectory(cwd=tmp_path).generate_unique_name("mygame") == "mygame-2"


def test_generate_unique_name_falls_back_on_errors(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _install(
        monkeypatch,
        {
            "user": Err(
                ProcessError(
                    command=("gh", "api", "user"),
                    returncode=1,
                    stdout="",
                    stderr="HTTP 401: Bad credentials",
                )
            ),
        },
    )

    assert GhRepositoryDirectory(cwd=tmp_path).generate_unique_name("MyGame") == "mygame"


def test_sanitize_name(tmp_path: Path) -> None:
    assert GhRepositoryDirectory(cwd=tmp_path).sanitize_name("My Game") == "my-game"
