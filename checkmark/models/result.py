"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass

from checkmark.models.error import AssertionFailure, UnhandledError


@dataclass(frozen=True, kw_only=True)
class DiagnosticRecord:
    """A warning emitted while a test was running.

    Diagnostics are informational only and never change the outcome of a test.
    """

    file: str
    line: int
    message: str
    category: str = "UserWarning"


@dataclass(frozen=True, kw_only=True)
class TestOutcome:
    """Result of a single test execution."""

    __test__ = False

    name: str
    captured_warnings: Sequence[DiagnosticRecord] = ()
    captured_output: str = ""
    error: AssertionFailure | UnhandledError | None = None
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        """Whether the test finished without an error."""
        return self.error is None

    @property
    def has_extra_data(self) -> bool:
        """Whether warnings or output were captured."""
        return bool(self.captured_warnings) or self.captured_output != ""


@dataclass(frozen=True, kw_only=True)
class SuiteSummary:
    """Outcomes of a suite together with their rendered reports."""

    suite_name: str
    outcomes: Sequence[TestOutcome] = ()
    per_test_reports: Sequence[str] = ()

    @property
    def passed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.passed)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.passed)

    @property
    def total(self) -> int:
        return len(self.outcomes)
