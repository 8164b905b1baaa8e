"""Tests for logging setup."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from reclaimer.utils.logging import setup_logging


def test_setup_logging_installs_rich_handler() -> None:
    """Test the root logger gets a single rich handler at the requested level."""
    setup_logging(level="DEBUG")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)
    assert logging.getLogger("botocore").level == logging.WARNING


def test_verbose_lets_sdk_loggers_through() -> None:
    """Test verbose mode lowers the AWS SDK logger levels."""
    setup_logging(level="INFO", verbose=True)

    assert logging.getLogger("boto3").level == logging.DEBUG
