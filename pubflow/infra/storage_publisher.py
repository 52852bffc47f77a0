"""ArtifactPublisher: storage bucket upload plus a deploy function call.

Flow for one upload:
1. zip the build directory into a private temp dir
2. POST the zip to the storage bucket under uploads/{creator}/{target}/
3. call ``deployFromStorage`` with the storage path and the intent; the
   function picks the final repository name and returns the live URL

One publisher serves one upload; ``close()`` releases the HTTP client and
the temp dir whatever the outcome.
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import quote

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import get_bool, get_str
from pubflow.infra.http import HttpClient
from pubflow.platform.files import zip_directory
from pubflow.publish.errors import PublishError
from pubflow.publish.model import UploadIntent, UploadReceipt
from pubflow.publish.ports import IdentityProvider, ProgressCallback

STORAGE_API = "https://firebasestorage.googleapis.com/v0/b"
DEPLOY_FUNCTION = "deployFromStorage"


def storage_upload_url(bucket: str, object_path: str) -> str:
    return f"{STORAGE_API}/{bucket}/o?name={quote(object_path, safe='')}"


class StoragePublisher:
    def __init__(
        self,
        *,
        bucket: str,
        identity: IdentityProvider,
        http: HttpClient,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=UTC),
    ) -> None:
        self._bucket = bucket
        self._identity = identity
        self._http = http
        self._clock = clock
        self._work_dir = Path(tempfile.mkdtemp(prefix="pubflow-upload-"))

    def upload(
        self,
        artifact_path: Path,
        creator_handle: str,
        target_name: str,
        intent: UploadIntent,
        on_progress: ProgressCallback,
    ) -> Result[UploadReceipt, PublishError]:
        token = self._identity.id_token()
        if token is None:
            return Err(
                PublishError(
                    kind="precondition",
                    gate="not_authenticated",
                    message="not signed in",
                )
            )
        if not artifact_path.is_dir():
            return Err(
                PublishError(
                    kind="publish",
                    message=f"build output not found: {artifact_path}",
                )
            )

        on_progress("Packaging build...")
        archive = self._work_dir / f"{target_name}.zip"
        try:
            count = zip_directory(artifact_path, archive)
        except OSError as e:
            return Err(PublishError(kind="publish", message=f"failed to package build: {e}"))
        if count == 0:
            return Err(PublishError(kind="publish", message=f"build output is empty: {artifact_path}"))

        stamp = self._clock().strftime("%Y%m%d%H%M%S")
        object_path = f"uploads/{creator_handle}/{target_name}/{stamp}.zip"

        on_progress("Uploading build to storage...")
        reported = [-1]

        def on_bytes(sent: int, total: int) -> None:
            pct = (sent * 100 // total) if total else 100
            # Report in 10% steps.
            if pct // 10 > reported[0]:
                reported[0] = pct // 10
                on_progress(f"Uploading build... {pct}%")

        uploaded = self._http.post_file(
            storage_upload_url(self._bucket, object_path),
            archive,
            content_type="application/zip",
            headers={"Authorization": f"Firebase {token}"},
            progress=on_bytes,
        )
        if isinstance(uploaded, Err):
            return Err(
                PublishError(
                    kind="publish",
                    message=f"storage upload failed: {uploaded.error.message}",
                    hint=str(uploaded.error),
                )
            )

        on_progress("Deploying...")
        deployed = self._identity.call_function(
            DEPLOY_FUNCTION,
            {
                "creatorUsername": creator_handle,
                "baseName": target_name,
                "intent": intent,
                "storagePath": object_path,
                "bucket": self._bucket,
            },
        )
        if isinstance(deployed, Err):
            return deployed

        data = deployed.value
        if get_bool(data, "success") is False:
            message = get_str(data, "error") or get_str(data, "message") or "deploy failed"
            return Err(PublishError(kind="publish", message=message))

        return Ok(
            UploadReceipt(
                actual_target_name=get_str(data, "projectName") or target_name,
                live_url=get_str(data, "url") or "",
            )
        )

    def close(self) -> None:
        self._http.close()
        shutil.rmtree(self._work_dir, ignore_errors=True)
