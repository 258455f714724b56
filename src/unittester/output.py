"""Console rendering for PASS/FAIL lines and diagnostic values."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

RED = "\x1b[31m"
GREEN = "\x1b[32m"
RESET = "\x1b[0m"

PASS_GLYPH = "☑"
FAIL_GLYPH = "☒"


class Palette:
    """ANSI color codes, or empty strings when color output is off."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    @property
    def red(self) -> str:
        return RED if self.enabled else ""

    @property
    def green(self) -> str:
        return GREEN if self.enabled else ""

    @property
    def reset(self) -> str:
        return RESET if self.enabled else ""


def pass_line(name: str, palette: Palette) -> str:
    return f"{palette.green}{PASS_GLYPH}  PASS  {palette.reset}{name}\n"


def fail_line(name: str, palette: Palette) -> str:
    return f"{palette.red}{FAIL_GLYPH}  FAIL  {palette.reset}{name}\n"


class ValueFormatter:
    """Renders values for diagnostic lines.

    Values are shown with ``repr()``. With ``bool_words`` on, booleans are
    shown as ``true``/``false`` instead.
    """

    def __init__(self) -> None:
        self.bool_words = False

    def __call__(self, value: Any) -> str:
        if self.bool_words and isinstance(value, bool):
            return "true" if value else "false"
        return repr(value)

    @contextmanager
    def scoped(self, *, bool_words: bool) -> Iterator[ValueFormatter]:
        """Override formatting flags for the duration of a ``with`` block.

        The previous flags are restored on exit, including when the block
        raises.
        """
        saved = self.bool_words
        self.bool_words = bool_words
        try:
            yield self
        finally:
            self.bool_words = saved
