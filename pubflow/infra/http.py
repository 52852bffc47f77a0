"""HTTP client abstraction for storage uploads and function calls.

This module provides:
- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import StrDict, as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def post_json(
        self, url: str, payload: Mapping[str, object], *, headers: Mapping[str, str] | None = None
    ) -> Result[StrDict, HttpError]:
        """POST a JSON body and parse a JSON object response."""
        ...

    def post_file(
        self,
        url: str,
        path: Path,
        *,
        content_type: str,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[StrDict, HttpError]:
        """POST a file body and parse a JSON object response.

        progress receives (bytes_sent, total_bytes).
        """
        ...

    def close(self) -> None: ...


class _ProgressReader:
    """File wrapper reporting bytes read to a callback (used as request body)."""

    def __init__(self, path: Path, progress: Callable[[int, int], None] | None) -> None:
        self._handle = path.open("rb")
        self._total = path.stat().st_size
        self._sent = 0
        self._progress = progress

    def __len__(self) -> int:
        return self._total

    def read(self, size: int = -1) -> bytes:
        chunk = self._handle.read(_CHUNK_SIZE if size is None or size < 0 else size)
        self._sent += len(chunk)
        if chunk and self._progress is not None:
            self._progress(self._sent, self._total)
        return chunk

    def close(self) -> None:
        self._handle.close()


class RealHttpClient:
    """Real HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 60.0, user_agent: str = "pubflow/0.1.0") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()
        self._closed = False

    def _send(
        self,
        url: str,
        *,
        body: bytes | _ProgressReader,
        content_type: str,
        headers: Mapping[str, str] | None,
    ) -> Result[StrDict, HttpError]:
        if self._closed:
            return Err(HttpError(url=url, status=0, message="client is closed"))

        all_headers = {
            "User-Agent": self.user_agent,
            "Content-Type": content_type,
            "Content-Length": str(len(body)),
        }
        all_headers.update(headers or {})
        req = urllib.request.Request(url, data=body, headers=all_headers, method="POST")  # type: ignore[arg-type]
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as r:
                raw: bytes = r.read()
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=_error_detail(e)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok({})
        try:
            data = as_str_dict(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(data)

    def post_json(
        self, url: str, payload: Mapping[str, object], *, headers: Mapping[str, str] | None = None
    ) -> Result[StrDict, HttpError]:
        body = json.dumps(payload).encode("utf-8")
        return self._send(url, body=body, content_type="application/json", headers=headers)

    def post_file(
        self,
        url: str,
        path: Path,
        *,
        content_type: str,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[StrDict, HttpError]:
        try:
            reader = _ProgressReader(path, progress)
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"cannot read {path}: {e}"))
        try:
            return self._send(url, body=reader, content_type=content_type, headers=headers)
        finally:
            reader.close()

    def close(self) -> None:
        self._closed = True


def _error_detail(error: urllib.error.HTTPError) -> str:
    """Prefer the service's JSON error message over the bare reason phrase."""
    try:
        data = as_str_dict(json.loads(error.read().decode("utf-8")))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return str(error.reason)
    if data is None:
        return str(error.reason)
    detail = data.get("error")
    nested = as_str_dict(detail)
    if nested is not None and isinstance(nested.get("message"), str):
        return str(nested["message"])
    if isinstance(detail, str):
        return detail
    return str(error.reason)


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by URL prefix so query strings need not be spelled
    out. Requests are recorded in ``calls`` as (method, url, body) tuples,
    where body is the JSON payload or the uploaded file's bytes.

    Usage:
        client = MockHttpClient()
        client.set_response("https://fn.example.com/deploy", {"url": "..."})
        client.post_json("https://fn.example.com/deploy", {"a": 1})
    """

    def __init__(self) -> None:
        self._responses: dict[str, StrDict | HttpError] = {}
        self.calls: list[tuple[str, str, object]] = []
        self.headers: list[dict[str, str]] = []
        self.closed = False

    def set_response(self, url_prefix: str, response: StrDict | HttpError) -> None:
        self._responses[url_prefix] = response

    def _lookup(self, url: str) -> Result[StrDict, HttpError]:
        for prefix, response in self._responses.items():
            if url.startswith(prefix):
                if isinstance(response, HttpError):
                    return Err(response)
                return Ok(response)
        return Err(HttpError(url=url, status=404, message="Not found (mock)"))

    def post_json(
        self, url: str, payload: Mapping[str, object], *, headers: Mapping[str, str] | None = None
    ) -> Result[StrDict, HttpError]:
        self.calls.append(("post_json", url, dict(payload)))
        self.headers.append(dict(headers or {}))
        return self._lookup(url)

    def post_file(
        self,
        url: str,
        path: Path,
        *,
        content_type: str,
        headers: Mapping[str, str] | None = None,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[StrDict, HttpError]:
        data = path.read_bytes()
        self.calls.append(("post_file", url, data))
        self.headers.append(dict(headers or {}))
        if progress is not None:
            progress(len(data), len(data))
        return self._lookup(url)

    def close(self) -> None:
        self.closed = True
