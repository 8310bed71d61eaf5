"""Serialisable records of test and suite results."""

from collections.abc import Sequence
from typing import Literal, Self

from pydantic import Field

from checkmark.models.base import Model
from checkmark.models.error import AssertionFailure, StackFrame
from checkmark.models.result import SuiteSummary, TestOutcome


class FrameRecord(Model):
    """A single stack frame."""

    file: str
    line: int
    function_name: str
    arguments: Sequence[str] = Field(default_factory=tuple)

    @classmethod
    def from_frame(cls, frame: StackFrame) -> Self:
        return cls(
            file=frame.file,
            line=frame.line,
            function_name=frame.function_name,
            arguments=tuple(frame.arguments),
        )


class ErrorRecord(Model):
    """The classified error of a failed test."""

    kind: Literal["assertion_failure", "unhandled_error"]
    message: str
    location: str = Field(..., description="Assertion call site or raising site")
    frames: Sequence[FrameRecord] = Field(
        default_factory=tuple,
        description="Assertion site frame, or the filtered traceback",
    )


class WarningRecord(Model):
    """A warning captured while a test ran."""

    file: str
    line: int
    message: str
    category: str


class OutcomeRecord(Model):
    """Result of one test."""

    name: str
    passed: bool
    duration: float
    output: str = ""
    warnings: Sequence[WarningRecord] = Field(default_factory=tuple)
    error: ErrorRecord | None = None

    @classmethod
    def from_outcome(cls, outcome: TestOutcome) -> Self:
        return cls(
            name=outcome.name,
            passed=outcome.passed,
            duration=outcome.duration,
            output=outcome.captured_output,
            warnings=tuple(
                WarningRecord(
                    file=record.file,
                    line=record.line,
                    message=record.message,
                    category=record.category,
                )
                for record in outcome.captured_warnings
            ),
            error=_error_record(outcome),
        )


class SuiteRecord(Model):
    """Results of one suite."""

    suite_name: str
    passed: int
    failed: int
    total: int
    outcomes: Sequence[OutcomeRecord] = Field(default_factory=tuple)

    @classmethod
    def from_summary(cls, summary: SuiteSummary) -> Self:
        return cls(
            suite_name=summary.suite_name,
            passed=summary.passed_count,
            failed=summary.failed_count,
            total=summary.total,
            outcomes=tuple(
                OutcomeRecord.from_outcome(outcome) for outcome in summary.outcomes
            ),
        )


def _error_record(outcome: TestOutcome) -> ErrorRecord | None:
    match outcome.error:
        case None:
            return None
        case AssertionFailure(message=message, site_frame=site_frame):
            return ErrorRecord(
                kind="assertion_failure",
                message=message,
                location=site_frame.location,
                frames=(FrameRecord.from_frame(site_frame),),
            )
        case error:
            return ErrorRecord(
                kind=error.kind,
                message=error.message,
                location=error.location,
                frames=tuple(FrameRecord.from_frame(frame) for frame in error.frames),
            )
