"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from unittester import UnitTester


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up unittester loggers after each test to prevent handler leaks."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("unittester")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def out():
    """In-memory output sink for a session."""
    return io.StringIO()


@pytest.fixture
def tester(out):
    """Session writing plain text (no ANSI codes) to the `out` fixture."""
    return UnitTester(out, color=False)
