"""System clipboard access through the platform's copy command."""

from __future__ import annotations

import logging
import subprocess
import sys
from shutil import which

__all__ = ["copy_to_clipboard"]

logger = logging.getLogger(__name__)

_COPY_TIMEOUT_SECONDS = 5.0


def _commands(platform: str) -> list[list[str]]:
    if platform == "darwin":
        return [["pbcopy"]]
    if platform == "win32":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_to_clipboard(text: str, *, platform: str | None = None) -> bool:
    """Copy text to the clipboard. Returns False when no copy tool worked."""
    for cmd in _commands(platform or sys.platform):
        if which(cmd[0]) is None:
            continue
        try:
            subprocess.run(
                cmd,
                input=text,
                text=True,
                capture_output=True,
                timeout=_COPY_TIMEOUT_SECONDS,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("clipboard command %s failed: %s", cmd[0], e)
            continue
        return True
    return False
