"""Platform abstraction layer."""

from .clipboard import copy_to_clipboard
from .files import atomic_write_text, zip_directory
from .process import ProcessError, run, stream

__all__ = [
    # clipboard
    "copy_to_clipboard",
    # files
    "atomic_write_text",
    "zip_directory",
    # process
    "ProcessError",
    "run",
    "stream",
]
