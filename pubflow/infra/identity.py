"""Creator identity from configuration and environment.

Token management is outside pubflow: whatever signs the creator in exports
the identity token as ``PUBFLOW_ID_TOKEN``. Its presence is what counts as
authenticated.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pubflow.core.result import Err, Ok, Result
from pubflow.core.structured import StrDict, as_str_dict
from pubflow.infra.http import HttpClient
from pubflow.publish.errors import PublishError

ENV_ID_TOKEN = "PUBFLOW_ID_TOKEN"
ENV_CREATOR = "PUBFLOW_CREATOR"


class ConfigIdentityProvider:
    def __init__(
        self,
        *,
        handle: str | None,
        functions_url: str,
        http: HttpClient,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._env = os.environ if env is None else env
        self._handle = (self._env.get(ENV_CREATOR) or handle or "").strip() or None
        self._functions_url = functions_url.rstrip("/")
        self._http = http

    @property
    def is_authenticated(self) -> bool:
        return self.id_token() is not None

    @property
    def creator_handle(self) -> str | None:
        return self._handle

    def id_token(self) -> str | None:
        token = self._env.get(ENV_ID_TOKEN, "").strip()
        return token or None

    def call_function(self, name: str, payload: StrDict) -> Result[StrDict, PublishError]:
        """POST ``{"data": payload}`` to ``{functions_url}/{name}``.

        Callable functions wrap their return value as ``{"result": {...}}``;
        the inner object is returned.
        """
        token = self.id_token()
        if token is None:
            return Err(
                PublishError(
                    kind="precondition",
                    gate="not_authenticated",
                    message="not signed in",
                    hint=f"Set {ENV_ID_TOKEN}",
                )
            )

        url = f"{self._functions_url}/{name}"
        response = self._http.post_json(
            url,
            {"data": payload},
            headers={"Authorization": f"Bearer {token}"},
        )
        if isinstance(response, Err):
            return Err(
                PublishError(
                    kind="publish",
                    message=f"{name} failed: {response.error.message}",
                    hint=str(response.error),
                )
            )

        result = as_str_dict(response.value.get("result"))
        if result is None:
            return Ok(response.value)
        return Ok(result)
