from __future__ import annotations

import logging


def configure_logging(*, verbose: bool = False) -> None:
    """Route pubflow's loggers through Rich on stderr.

    Warnings and errors are shown by default; --verbose adds debug output.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("pubflow")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
