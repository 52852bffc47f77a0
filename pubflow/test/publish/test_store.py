from __future__ import annotations

import json
from pathlib import Path

from pubflow.core.result import Err, Ok
from pubflow.publish.model import PublishedRecord
from pubflow.publish.store import KEY_LAST_PROJECT_NAME, KEY_PUBLISHED_URL, PublishStore


def _store(tmp_path: Path) -> PublishStore:
    return PublishStore(tmp_path / ".pubflow" / "prefs.json")


def test_load_missing_file_is_none(tmp_path: Path) -> None:
    assert _store(tmp_path).load() == Ok(None)


def test_save_writes_both_keys(tmp_path: Path) -> None:
    store = _store(tmp_path)

    result = store.save(
        PublishedRecord(published_url="https://alice.example.com/mygame/", last_project_name="mygame")
    )

    assert isinstance(result, Ok)
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data == {
        KEY_PUBLISHED_URL: "https://alice.example.com/mygame/",
        KEY_LAST_PROJECT_NAME: "mygame",
    }
    assert store.load() == Ok(
        PublishedRecord(published_url="https://alice.example.com/mygame/", last_project_name="mygame")
    )


def test_save_preserves_unknown_keys(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text(json.dumps({"Theme": "dark"}), encoding="utf-8")

    store.save(PublishedRecord(published_url="u", last_project_name="n"))

    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data["Theme"] == "dark"
    assert data[KEY_PUBLISHED_URL] == "u"


def test_load_corrupt_file_is_io_error(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")

    result = store.load()

    assert isinstance(result, Err)
    assert result.error.kind == "io"


def test_load_non_object_is_io_error(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("[1, 2]", encoding="utf-8")

    result = store.load()

    assert isinstance(result, Err)
    assert result.error.message == "invalid publish state format"


def test_save_overwrites_corrupt_file(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")

    assert isinstance(store.save(PublishedRecord(published_url="u", last_project_name="n")), Ok)
    assert store.load() == Ok(PublishedRecord(published_url="u", last_project_name="n"))


def test_clear_removes_file_when_nothing_else_remains(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.save(PublishedRecord(published_url="u", last_project_name="n"))

    assert isinstance(store.clear(), Ok)

    assert not store.path.exists()
    assert store.load() == Ok(None)


def test_clear_keeps_unknown_keys(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text(
        json.dumps({"Theme": "dark", KEY_PUBLISHED_URL: "u", KEY_LAST_PROJECT_NAME: "n"}),
        encoding="utf-8",
    )

    assert isinstance(store.clear(), Ok)

    assert json.loads(store.path.read_text(encoding="utf-8")) == {"Theme": "dark"}


def test_clear_corrupt_file_deletes_it(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")

    assert isinstance(store.clear(), Ok)
    assert not store.path.exists()


def test_clear_missing_file(tmp_path: Path) -> None:
    assert isinstance(_store(tmp_path).clear(), Ok)
