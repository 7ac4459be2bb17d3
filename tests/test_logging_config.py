"""Tests for logging setup."""

import logging

from tube2notes.logging_config import configure_logging


def test_configure_logging_sets_root_level():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging("nonsense")
    assert logging.getLogger().level == logging.INFO
