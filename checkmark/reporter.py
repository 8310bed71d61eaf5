"""Rendering of test outcomes and suite summaries as text reports."""

from collections.abc import Sequence

from checkmark.formatting import bullet, indent
from checkmark.models.error import AssertionFailure, StackFrame, UnhandledError
from checkmark.models.result import DiagnosticRecord, SuiteSummary, TestOutcome

PASS_GLYPH = "[✓]"
FAIL_GLYPH = "[✗]"
TRACEBACK_END = "{main}"

TEST_PASSED = f"{PASS_GLYPH} Test passed: {{name}}\n"

TEST_PASSED_EXTRA = f"""\
{PASS_GLYPH} Test passed with details:
    Name: {{name}}
{{extra}}"""

TEST_FAILED_ASSERTION = f"""\
{FAIL_GLYPH} Test failed:
    Name: {{name}}
    Message: {{message}}
    Assertion: {{assertion}}
{{extra}}"""

TEST_RAISED_EXCEPTION = f"""\
{FAIL_GLYPH} Test thrown an exception:
    Name: {{name}}
    Message: {{message}}
    At: {{location}}
    Traceback:
{{traceback}}
{{extra}}"""

SUITE_RESULT = """
Test suite:
{reports}
Results:
    Suite Name: {name}
    Passed: {passed}/{total}
    Failed: {failed}/{total}
"""

SUITE_CONFIGURATION_ERROR = f"""\
{FAIL_GLYPH} Suite configuration error:
    Suite: {{name}}
    Message: {{message}}
"""


def render_outcome(outcome: TestOutcome) -> str:
    """Render a test outcome as a report ending with a newline."""
    extra = indent(render_extra_data(outcome))

    match outcome.error:
        case None if not outcome.has_extra_data:
            return TEST_PASSED.format(name=outcome.name)
        case None:
            return TEST_PASSED_EXTRA.format(name=outcome.name, extra=extra)
        case AssertionFailure(message=message, site_frame=site_frame):
            return TEST_FAILED_ASSERTION.format(
                name=outcome.name,
                message=message,
                assertion=render_frame(site_frame),
                extra=extra,
            )
        case UnhandledError(message=message, frames=frames) as error:
            return TEST_RAISED_EXCEPTION.format(
                name=outcome.name,
                message=message,
                location=error.location,
                traceback=indent(render_traceback(frames), 2),
                extra=extra,
            )


def render_frame(frame: StackFrame) -> str:
    """Render a frame as ``file:line | function(args)``."""
    arguments = ", ".join(frame.arguments)
    return f"{frame.location} | {frame.function_name}({arguments})"


def render_traceback(frames: Sequence[StackFrame]) -> str:
    """Render frames one per line, closed by the terminal marker."""
    return "\n".join([*(render_frame(frame) for frame in frames), TRACEBACK_END])


def render_extra_data(outcome: TestOutcome) -> str:
    """Render captured warnings and output, or nothing when none were captured."""
    sections: list[str] = []
    if outcome.captured_warnings:
        sections.append(render_warnings(outcome.captured_warnings))
    if outcome.captured_output:
        sections.append(render_output(outcome.captured_output))
    return "".join(f"{section}\n" for section in sections)


def render_warnings(records: Sequence[DiagnosticRecord]) -> str:
    lines = [
        indent(bullet(f"{record.file}:{record.line} | {record.message}"))
        for record in records
    ]
    return "\n".join(["Warnings:", *lines])


def render_output(output: str) -> str:
    return f"Output:\n{indent(output.strip())}"


def render_suite(summary: SuiteSummary) -> str:
    """Render a suite summary following its per-test reports."""
    return SUITE_RESULT.format(
        reports="".join(summary.per_test_reports),
        name=summary.suite_name,
        passed=summary.passed_count,
        failed=summary.failed_count,
        total=summary.total,
    )


def render_configuration_error(suite_name: str, error: Exception) -> str:
    """Render an error that prevented a suite from being built."""
    return SUITE_CONFIGURATION_ERROR.format(name=suite_name, message=error)
