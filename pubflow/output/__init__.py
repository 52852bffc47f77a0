"""Terminal output: console abstraction, error presentation, logging setup."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .errors import print_publish_error, publish_error_exit_code
from .logging import configure_logging

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "configure_logging",
    "print_publish_error",
    "publish_error_exit_code",
]
