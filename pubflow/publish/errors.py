from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PublishErrorKind = Literal[
    "precondition",
    "busy",
    "build",
    "directory",
    "publish",
    "internal",
    "invalid_input",
    "io",
]

PreconditionGate = Literal[
    "not_authenticated",
    "missing_creator_handle",
    "missing_credential",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    """Canonical publish error payload.

    ``gate`` is set only for ``precondition`` errors and names the startup
    check that failed so the user can be pointed at the right fix.
    """

    kind: PublishErrorKind
    message: str
    hint: str | None = None
    gate: PreconditionGate | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def precondition_error(gate: PreconditionGate) -> PublishError:
    match gate:
        case "not_authenticated":
            return PublishError(
                kind="precondition",
                gate=gate,
                message="not signed in",
                hint="Sign in first (set PUBFLOW_ID_TOKEN)",
            )
        case "missing_creator_handle":
            return PublishError(
                kind="precondition",
                gate=gate,
                message="creator handle not reserved",
                hint="Set [creator] handle in pubflow.toml",
            )
        case "missing_credential":
            return PublishError(
                kind="precondition",
                gate=gate,
                message="hosting credential not configured",
                hint="Run: gh auth login",
            )
