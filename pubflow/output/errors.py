"""Error presentation utilities.

Centralized formatting and exit code mapping for publish errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pubflow.core.errors import ErrorCode
from pubflow.output.console import Style
from pubflow.publish.errors import PublishError

if TYPE_CHECKING:
    from pubflow.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]

_GATE_TITLES = {
    "not_authenticated": "Sign-in",
    "missing_creator_handle": "Creator handle",
    "missing_credential": "Hosting credential",
}


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    match error:
        case PublishError(kind="precondition", gate=gate) if gate is not None:
            console.error(f"{_GATE_TITLES[gate]}: {error.message}")
        case PublishError(kind="build" | "publish" | "internal"):
            console.error(f"Publishing failed: {error.message}")
        case _:
            console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    match error.kind:
        case "invalid_input" | "busy":
            return int(ErrorCode.USER_ERROR)
        case "precondition":
            return int(ErrorCode.ENV_ERROR)
        case "build":
            return int(ErrorCode.BUILD_ERROR)
        case "directory" | "publish":
            return int(ErrorCode.NETWORK_ERROR)
        case "io":
            return int(ErrorCode.IO_ERROR)
        case "internal":
            return int(ErrorCode.INTERNAL_ERROR)
