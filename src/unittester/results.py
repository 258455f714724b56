"""Base data structures for recorded assertion outcomes."""

from dataclasses import dataclass
from enum import Enum


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"


@dataclass
class AssertionResult:
    """Result of a single assertion call on a session.

    Attributes:
        name: Identifier the test was run under.
        outcome: Whether the test passed, failed, or was skipped by the filter.
        message: Diagnostic line for failures, without its indentation.
            Empty for passes and skips.
    """

    name: str
    outcome: Outcome
    message: str = ""

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASS
