"""Execution of a single test callback."""

import logging
import time
from collections.abc import Callable
from typing import Any, TypeAlias

from checkmark.assertions import Test
from checkmark.capture import CaptureScope
from checkmark.config import RunnerConfig
from checkmark.models.error import ClassifiedError
from checkmark.models.result import TestOutcome
from checkmark.reporter import render_outcome
from checkmark.tracebacks import classify

log = logging.getLogger(__name__)

TestCallback: TypeAlias = Callable[[Test], Any]


def execute(
    name: str, callback: TestCallback, *, config: RunnerConfig | None = None
) -> TestOutcome:
    """Run ``callback`` with a fresh ``Test`` handle and record the outcome.

    Stdout writes and warnings are captured for the duration of the call. Any
    ``Exception`` or ``SystemExit`` raised by the callback is classified and
    stored on the outcome instead of propagating. ``KeyboardInterrupt`` still
    propagates once the capture scope is released.
    """
    config = config or RunnerConfig()
    error: ClassifiedError | None = None

    log.debug("Running test %s", name)
    start = time.perf_counter()
    with CaptureScope(warnings_action=config.warnings_action) as scope:
        try:
            callback(Test())
        except (Exception, SystemExit) as e:
            error = classify(e)
    duration = time.perf_counter() - start

    outcome = TestOutcome(
        name=name,
        captured_warnings=scope.warnings,
        captured_output=scope.output,
        error=error,
        duration=duration,
    )
    log.debug(
        "Test completed: name=%s passed=%s duration=%.3fs",
        name,
        outcome.passed,
        duration,
    )
    return outcome


def run_test(
    name: str, callback: TestCallback, *, config: RunnerConfig | None = None
) -> None:
    """Run a single test and print its report."""
    print(render_outcome(execute(name, callback, config=config)), end="")
