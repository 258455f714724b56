"""Test session: runs expectations immediately and keeps the tally."""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, TextIO

from unittester.config import SessionConfig, TestFilter
from unittester.output import Palette, ValueFormatter, fail_line, pass_line
from unittester.results import AssertionResult, Outcome

ExceptionKind = type[BaseException] | tuple[type[BaseException], ...]


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _kind_name(kind: ExceptionKind) -> str:
    if isinstance(kind, tuple):
        return " or ".join(k.__name__ for k in kind)
    return kind.__name__


def _check_kind(kind: Any) -> None:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if not kinds or not all(
        isinstance(k, type) and issubclass(k, BaseException) for k in kinds
    ):
        raise TypeError(
            f"expected an exception class or a tuple of them, got {kind!r}"
        )


class UnitTester:
    """Runs tests as they are declared and reports PASS/FAIL to a stream.

    Every ``expect_*`` call runs its test immediately, writes one PASS or
    FAIL line (plus a diagnostic line on failure) and returns whether the
    test passed. Exceptions raised by a test never escape an assertion call.

    Example:
        test = UnitTester()
        test("1+1 equals 2").expect_value(2, lambda: 1 + 1)
        test.expect_in_range("one third", 0.333, 0.334, lambda: 1 / 3)
        test.summary()
    """

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        color: bool = True,
        hide_pass: bool = False,
        only_if: TestFilter | None = None,
        logger: logging.Logger | None = None,
    ):
        self.out = out if out is not None else sys.stdout
        self.logger = logger or logging.getLogger(__name__)
        self._palette = Palette(color)
        self._format = ValueFormatter()
        self._hide_pass = hide_pass
        self._filter: TestFilter | None = None
        self._pass_count = 0
        self._fail_count = 0
        self._skip_count = 0
        self._results: list[AssertionResult] = []
        if only_if is not None:
            self.only_if(only_if)

    def __call__(self, name: str) -> NamedTest:
        return NamedTest(self, name)

    def __enter__(self) -> UnitTester:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.summary()

    # --- counters -----------------------------------------------------

    @property
    def pass_count(self) -> int:
        return self._pass_count

    @property
    def fail_count(self) -> int:
        return self._fail_count

    @property
    def skip_count(self) -> int:
        return self._skip_count

    @property
    def results(self) -> tuple[AssertionResult, ...]:
        return tuple(self._results)

    @property
    def exit_code(self) -> int:
        """Process exit status for a run: 1 if any test failed, else 0."""
        return 1 if self._fail_count else 0

    def summary(self) -> None:
        """Write the skipped, passed and failed counts to the output stream."""
        if self._skip_count > 0:
            self.out.write(f"{self._skip_count} tests skipped.\n")
        self.out.write(f"{self._pass_count} tests passed.\n")
        if self._fail_count > 0:
            p = self._palette
            self.out.write(f"{self._fail_count} tests {p.red}FAILED !{p.reset}\n")

    # --- configuration ------------------------------------------------

    @property
    def color_enabled(self) -> bool:
        return self._palette.enabled

    @property
    def pass_hidden(self) -> bool:
        return self._hide_pass

    def color_output(self, enabled: bool = True) -> UnitTester:
        """Enable or disable ANSI colors in the output. Enabled by default."""
        self._palette.enabled = enabled
        return self

    def hide_pass(self) -> UnitTester:
        self._hide_pass = True
        return self

    def show_pass(self) -> UnitTester:
        self._hide_pass = False
        return self

    def only_if(self, predicate: TestFilter) -> UnitTester:
        """Run tests only when ``predicate(name)`` is true.

        Replaces any previous predicate. Tests it rejects are counted as
        skipped, print nothing and are never called.
        """
        if not callable(predicate):
            raise TypeError(f"filter must be callable, got {predicate!r}")
        self._filter = predicate
        return self

    def always(self) -> UnitTester:
        """Remove the predicate set by only_if()."""
        self._filter = None
        return self

    def configure(self, config: SessionConfig) -> UnitTester:
        self.color_output(config.color)
        if config.hide_pass:
            self.hide_pass()
        else:
            self.show_pass()
        predicate = config.build_filter()
        if predicate is None:
            return self.always()
        return self.only_if(predicate)

    # --- assertions ---------------------------------------------------

    def expect_true(self, name: str, test: Callable[[], Any]) -> bool:
        """Run a test expected to return a truthy value."""
        if self._skipped(name):
            return False
        with self._format.scoped(bool_words=True):
            return self._check_value(name, True, lambda: bool(test()))

    def expect_false(self, name: str, test: Callable[[], Any]) -> bool:
        """Run a test expected to return a falsy value."""
        if self._skipped(name):
            return False
        with self._format.scoped(bool_words=True):
            return self._check_value(name, False, lambda: bool(test()))

    def expect_value(self, name: str, value: Any, test: Callable[[], Any]) -> bool:
        """Run a test expected to return something equal to ``value``."""
        if self._skipped(name):
            return False
        return self._check_value(name, value, test)

    def expect_in_range(
        self, name: str, minimum: Any, maximum: Any, test: Callable[[], Any]
    ) -> bool:
        """Run a test expected to return a value in ``[minimum, maximum]``.

        Both bounds are included. Useful for floating point results; a test
        with a random result passing once does not mean it always will.
        """
        if self._skipped(name):
            return False
        fmt = self._format
        bounds = f"[{fmt(minimum)}, {fmt(maximum)}]"
        try:
            actual = test()
            passed = bool(minimum <= actual and actual <= maximum)
            message = (
                "" if passed else f"value {fmt(actual)} is not in expected range {bounds}"
            )
        except KeyboardInterrupt:
            raise
        except Exception as exc:
            self.logger.debug(f"{name} raised during range check", exc_info=True)
            passed = False
            message = f"expected a value in {bounds}, got exception: {_describe(exc)}"
        except BaseException:
            self.logger.debug(f"{name} raised during range check", exc_info=True)
            passed = False
            message = (
                f"expected a value in {bounds}, "
                "got exception not derived from Exception"
            )
        return self._record(name, passed, message)

    def expect_any_exception(self, name: str, test: Callable[[], Any]) -> bool:
        """Run a test expected to raise an exception of any type."""
        if self._skipped(name):
            return False
        raised = False
        try:
            test()
        except KeyboardInterrupt:
            raise
        except BaseException as exc:
            self.logger.debug(f"{name} raised {type(exc).__name__} as expected")
            raised = True
        return self._record(name, raised, "expected exception was not thrown.")

    def expect_exception(
        self, name: str, kind: ExceptionKind, test: Callable[[], Any]
    ) -> bool:
        """Run a test expected to raise an exception of type ``kind``.

        ``kind`` may also be a tuple of exception classes, as for ``except``.
        """
        _check_kind(kind)
        if self._skipped(name):
            return False
        raised: BaseException | None = None
        try:
            test()
        except BaseException as exc:
            if not isinstance(exc, kind) and isinstance(exc, KeyboardInterrupt):
                raise
            raised = exc

        if raised is None:
            return self._record(name, False, "expected exception was not thrown.")
        if isinstance(raised, kind):
            return self._record(name, True, "")
        return self._record(
            name,
            False,
            "an exception happened but not of the correct type "
            f"(expected {_kind_name(kind)}, got {type(raised).__name__}).",
        )

    # --- bookkeeping --------------------------------------------------

    def _check_value(self, name: str, value: Any, test: Callable[[], Any]) -> bool:
        fmt = self._format
        try:
            actual = test()
            passed = bool(actual == value)
            message = (
                ""
                if passed
                else f"expected value {fmt(value)}, found {fmt(actual)} instead."
            )
        except KeyboardInterrupt:
            raise
        except Exception as exc:
            self.logger.debug(f"{name} raised during value check", exc_info=True)
            passed = False
            message = f"expected value {fmt(value)}, got exception: {_describe(exc)}"
        except BaseException:
            self.logger.debug(f"{name} raised during value check", exc_info=True)
            passed = False
            message = (
                f"expected value {fmt(value)}, "
                "got exception not derived from Exception"
            )
        return self._record(name, passed, message)

    def _skipped(self, name: str) -> bool:
        if self._filter is None or self._filter(name):
            return False
        self._skip_count += 1
        self._results.append(AssertionResult(name=name, outcome=Outcome.SKIP))
        self.logger.debug(f"SKIP {name}")
        return True

    def _record(self, name: str, passed: bool, message: str) -> bool:
        if passed:
            self._pass_count += 1
            self._results.append(AssertionResult(name=name, outcome=Outcome.PASS))
            self.logger.debug(f"PASS {name}")
            if not self._hide_pass:
                self.out.write(pass_line(name, self._palette))
            return True

        self._fail_count += 1
        self._results.append(
            AssertionResult(name=name, outcome=Outcome.FAIL, message=message)
        )
        self.logger.debug(f"FAIL {name}: {message}")
        self.out.write(fail_line(name, self._palette))
        self.out.write(f"  {message}\n")
        return False


class NamedTest:
    """A test name bound to a session, returned by ``UnitTester.__call__``.

    Enables ``test("id").expect_value(42, lambda: 40 + 2)`` as a shorthand
    for ``test.expect_value("id", 42, lambda: 40 + 2)``.
    """

    def __init__(self, tester: UnitTester, name: str):
        self.tester = tester
        self.name = str(name)

    def expect_true(self, test: Callable[[], Any]) -> bool:
        return self.tester.expect_true(self.name, test)

    def expect_false(self, test: Callable[[], Any]) -> bool:
        return self.tester.expect_false(self.name, test)

    def expect_value(self, value: Any, test: Callable[[], Any]) -> bool:
        return self.tester.expect_value(self.name, value, test)

    def expect_in_range(
        self, minimum: Any, maximum: Any, test: Callable[[], Any]
    ) -> bool:
        return self.tester.expect_in_range(self.name, minimum, maximum, test)

    def expect_any_exception(self, test: Callable[[], Any]) -> bool:
        return self.tester.expect_any_exception(self.name, test)

    def expect_exception(self, kind: ExceptionKind, test: Callable[[], Any]) -> bool:
        return self.tester.expect_exception(self.name, kind, test)
