"""Exit codes for CLI commands.

Each publish failure category maps to one of these codes (see
``pubflow.output.errors``). Values are process exit codes and must stay
stable for scripts that wrap the CLI.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    - 0: Success
    - 1: User error (bad option, nothing to update, aborted)
    - 2: Environment error (sign-in, creator handle, hosting credential)
    - 3: Build error (local build failed)
    - 4: Network error (repository listing or upload failed)
    - 5: I/O error (persisted state unreadable or unwritable)
    - 6: Internal error (unexpected exception)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTERNAL_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
