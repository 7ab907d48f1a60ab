"""Logging setup for the CLI and the server."""

import logging

from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> None:
    """Route all loggers through a rich console handler.

    Args:
        level: Root log level (name or number).
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
