"""Persisted record of the last successful publish.

A small key/value JSON file:

    {
      "PublishedURL": "https://alice.unreality3d.com/mygame/",
      "LastProjectName": "mygame"
    }

Both keys are written together on success and removed together on reset.
Unknown keys are preserved so other tools can share the file.
"""

from __future__ import annotations

import json
from pathlib import Path

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import StrDict, as_str_dict, get_str
from pubflow.platform.files import atomic_write_text
from pubflow.publish.errors import PublishError
from pubflow.publish.model import PublishedRecord

KEY_PUBLISHED_URL = "PublishedURL"
KEY_LAST_PROJECT_NAME = "LastProjectName"


class PublishStore:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Result[StrDict, PublishError]:
        if not self._path.exists():
            return Ok({})
        try:
            obj: object = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            return Err(
                PublishError(
                    kind="io",
                    message=f"failed to read publish state: {e}",
                    hint=str(self._path),
                )
            )
        data = as_str_dict(obj)
        if data is None:
            return Err(
                PublishError(
                    kind="io",
                    message="invalid publish state format",
                    hint=str(self._path),
                )
            )
        return Ok(data)

    def _write(self, data: StrDict) -> Result[None, PublishError]:
        try:
            atomic_write_text(self._path, json.dumps(data, indent=2) + "\n")
        except OSError as e:
            return Err(
                PublishError(
                    kind="io",
                    message=f"failed to write publish state: {e}",
                    hint=str(self._path),
                )
            )
        return Ok(None)

    def load(self) -> Result[PublishedRecord | None, PublishError]:
        data = self._read()
        if isinstance(data, Err):
            return data

        url = get_str(data.value, KEY_PUBLISHED_URL)
        if url is None:
            return Ok(None)
        return Ok(
            PublishedRecord(
                published_url=url,
                last_project_name=get_str(data.value, KEY_LAST_PROJECT_NAME),
            )
        )

    def save(self, record: PublishedRecord) -> Result[None, PublishError]:
        data = self._read()
        if isinstance(data, Err):
            # A corrupt file must not block recording a successful publish.
            current: StrDict = {}
        else:
            current = dict(data.value)

        current[KEY_PUBLISHED_URL] = record.published_url
        if record.last_project_name is not None:
            current[KEY_LAST_PROJECT_NAME] = record.last_project_name
        else:
            current.pop(KEY_LAST_PROJECT_NAME, None)
        return self._write(current)

    def clear(self) -> Result[None, PublishError]:
        data = self._read()
        if isinstance(data, Err):
            try:
                self._path.unlink(missing_ok=True)
            except OSError as e:
                return Err(
                    PublishError(
                        kind="io",
                        message=f"failed to delete publish state: {e}",
                        hint=str(self._path),
                    )
                )
            return Ok(None)

        if not data.value:
            return Ok(None)
        remaining = {
            k: v
            for k, v in data.value.items()
            if k not in (KEY_PUBLISHED_URL, KEY_LAST_PROJECT_NAME)
        }
        if remaining:
            return self._write(remaining)
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            return Err(
                PublishError(
                    kind="io",
                    message=f"failed to delete publish state: {e}",
                    hint=str(self._path),
                )
            )
        return Ok(None)
