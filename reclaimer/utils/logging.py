"""Logging configuration."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

# Chatty third-party loggers kept at WARNING unless running verbose
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging with a rich console handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        verbose: Include timestamps and let AWS SDK loggers through
    """
    handler = RichHandler(
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
