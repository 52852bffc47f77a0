from __future__ import annotations

import zipfile
from datetime import UTC, datetime
from pathlib import Path

from pubflow.core.result import Err, Ok
from pubflow.infra.http import HttpError, MockHttpClient
from pubflow.infra.identity import ENV_ID_TOKEN, ConfigIdentityProvider
from pubflow.infra.storage_publisher import STORAGE_API, StoragePublisher, storage_upload_url
from pubflow.publish.model import UploadReceipt

FUNCTIONS = "https://fn.example.com"
DEPLOY_URL = f"{FUNCTIONS}/deployFromStorage"


def _build(tmp_path: Path) -> Path:
    build = tmp_path / "WebGLBuild_20240501_120000"
    (build / "Build").mkdir(parents=True)
    (build / "index.html").write_text("<html></html>", encoding="utf-8")
    (build / "Build" / "game.wasm").write_bytes(b"\x00asm" * 100)
    return build


def _publisher(
    *, token: str | None = "tok"
) -> tuple[StoragePublisher, MockHttpClient, MockHttpClient]:
    functions = MockHttpClient()
    storage = MockHttpClient()
    storage.set_response(STORAGE_API, {"name": "uploaded"})
    env = {ENV_ID_TOKEN: token} if token else {}
    identity = ConfigIdentityProvider(
        handle="alice", functions_url=FUNCTIONS, http=functions, env=env
    )
    publisher = StoragePublisher(
        bucket="demo-bucket",
        identity=identity,
        http=storage,
        clock=lambda: datetime(2024, 5, 1, 12, 30, 0, tzinfo=UTC),
    )
    return publisher, storage, functions


def test_storage_upload_url_encodes_object_path() -> None:
    assert storage_upload_url("b", "uploads/alice/mygame/1.zip") == (
        f"{STORAGE_API}/b/o?name=uploads%2Falice%2Fmygame%2F1.zip"
    )


def test_upload_then_deploy(tmp_path: Path) -> None:
    publisher, storage, functions = _publisher()
    functions.set_response(
        DEPLOY_URL,
        {"result": {"success": True, "projectName": "mygame-2", "url": "https://alice.example.com/mygame-2/"}},
    )
    progress: list[str] = []

    result = publisher.upload(_build(tmp_path), "alice", "mygame", "create_new", progress.append)

    assert result == Ok(
        UploadReceipt(actual_target_name="mygame-2", live_url="https://alice.example.com/mygame-2/")
    )

    object_path = "uploads/alice/mygame/20240501123000.zip"
    method, url, body = storage.calls[0]
    assert method == "post_file"
    assert url == storage_upload_url("demo-bucket", object_path)
    assert storage.headers[0] == {"Authorization": "Firebase tok"}
    archive = tmp_path / "uploaded.zip"
    assert isinstance(body, bytes)
    archive.write_bytes(body)
    with zipfile.ZipFile(archive) as zf:
        assert sorted(zf.namelist()) == ["Build/game.wasm", "index.html"]

    assert functions.calls == [
        (
            "post_json",
            DEPLOY_URL,
            {
                "data": {
                    "creatorUsername": "alice",
                    "baseName": "mygame",
                    "intent": "create_new",
                    "storagePath": object_path,
                    "bucket": "demo-bucket",
                }
            },
        )
    ]
    assert progress == [
        "Packaging build...",
        "Uploading build to storage...",
        "Uploading build... 100%",
        "Deploying...",
    ]
    publisher.close()


def test_receipt_defaults_to_requested_name(tmp_path: Path) -> None:
    publisher, _, functions = _publisher()
    functions.set_response(DEPLOY_URL, {"result": {"success": True}})

    result = publisher.upload(_build(tmp_path), "alice", "mygame", "update_existing", lambda _: None)

    assert result == Ok(UploadReceipt(actual_target_name="mygame", live_url=""))


def test_deploy_reports_failure(tmp_path: Path) -> None:
    publisher, _, functions = _publisher()
    functions.set_response(DEPLOY_URL, {"result": {"success": False, "error": "name taken"}})

    result = publisher.upload(_build(tmp_path), "alice", "mygame", "create_new", lambda _: None)

    assert isinstance(result, Err)
    assert result.error.kind == "publish"
    assert result.error.message == "name taken"


def test_storage_failure_skips_deploy(tmp_path: Path) -> None:
    publisher, storage, functions = _publisher()
    storage.set_response(
        STORAGE_API, HttpError(url=STORAGE_API, status=403, message="Permission denied")
    )

    result = publisher.upload(_build(tmp_path), "alice", "mygame", "create_new", lambda _: None)

    assert isinstance(result, Err)
    assert result.error.message == "storage upload failed: Permission denied"
    assert functions.calls == []


def test_requires_token(tmp_path: Path) -> None:
    publisher, storage, _ = _publisher(token=None)

    result = publisher.upload(_build(tmp_path), "alice", "mygame", "create_new", lambda _: None)

    assert isinstance(result, Err)
    assert result.error.gate == "not_authenticated"
    assert storage.calls == []


def test_missing_or_empty_build(tmp_path: Path) -> None:
    publisher, _, _ = _publisher()
    empty = tmp_path / "empty"
    empty.mkdir()

    missing = publisher.upload(tmp_path / "nope", "alice", "mygame", "create_new", lambda _: None)
    nothing = publisher.upload(empty, "alice", "mygame", "create_new", lambda _: None)

    assert isinstance(missing, Err)
    assert "not found" in missing.error.message
    assert isinstance(nothing, Err)
    assert "empty" in nothing.error.message


def test_close_releases_resources(tmp_path: Path) -> None:
    publisher, storage, functions = _publisher()
    functions.set_response(DEPLOY_URL, {"result": {"success": True}})
    publisher.upload(_build(tmp_path), "alice", "mygame", "create_new", lambda _: None)
    work_dir = publisher._work_dir
    assert work_dir.is_dir()

    publisher.close()

    assert storage.closed is True
    assert not work_dir.exists()
