"""Immediate-mode unit testing: declare an expectation, get PASS/FAIL."""

from unittester.config import SessionConfig, load_config
from unittester.results import AssertionResult, Outcome
from unittester.session import NamedTest, UnitTester

__all__ = [
    "AssertionResult",
    "NamedTest",
    "Outcome",
    "SessionConfig",
    "UnitTester",
    "load_config",
]
