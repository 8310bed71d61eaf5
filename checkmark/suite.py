"""Sequential execution of named tests as a suite."""

import logging
from collections.abc import Callable
from typing import Any, TypeAlias

from checkmark.assertions import Test
from checkmark.config import RunnerConfig
from checkmark.discovery import TestDescriptor, discover_tests
from checkmark.executor import TestCallback, execute
from checkmark.formatting import indent
from checkmark.models.result import SuiteSummary, TestOutcome
from checkmark.reporter import render_outcome, render_suite

log = logging.getLogger(__name__)

Register: TypeAlias = Callable[[str, TestCallback], None]
SuiteBuilder: TypeAlias = Callable[[Register], Any]


def build_suite(
    name: str, builder: SuiteBuilder, *, config: RunnerConfig | None = None
) -> SuiteSummary:
    """Run every test the builder registers and collect the results.

    Each call to the registration function runs its test immediately, so
    tests execute one after another in registration order. Errors raised by
    the builder itself are not intercepted.
    """
    outcomes: list[TestOutcome] = []
    reports: list[str] = []

    def register(test_name: str, callback: TestCallback) -> None:
        outcome = execute(test_name, callback, config=config)
        outcomes.append(outcome)
        reports.append(indent(render_outcome(outcome)))

    log.info("Running suite %s", name)
    builder(register)

    summary = SuiteSummary(
        suite_name=name, outcomes=tuple(outcomes), per_test_reports=tuple(reports)
    )
    log.info(
        "Suite completed: name=%s passed=%d failed=%d",
        name,
        summary.passed_count,
        summary.failed_count,
    )
    return summary


def run_suite(
    name: str, builder: SuiteBuilder, *, config: RunnerConfig | None = None
) -> None:
    """Run a suite and print its summary."""
    print(render_suite(build_suite(name, builder, config=config)), end="")


def build_class_suite(
    obj: object,
    display_name: str | None = None,
    *,
    config: RunnerConfig | None = None,
) -> SuiteSummary:
    """Run the marked test methods of ``obj`` as a suite.

    Raises:
        MethodFilteringError: If a marked method is not a valid test

    """
    config = config or RunnerConfig()
    descriptors = discover_tests(obj, marker=config.marker)

    def builder(register: Register) -> None:
        for descriptor in descriptors:
            register(descriptor.display_name, _guarded(obj, descriptor))

    return build_suite(display_name or type(obj).__name__, builder, config=config)


def run_suite_from_annotated_methods(
    obj: object,
    display_name: str | None = None,
    *,
    config: RunnerConfig | None = None,
) -> None:
    """Run the marked test methods of ``obj`` and print the suite summary."""
    print(render_suite(build_class_suite(obj, display_name, config=config)), end="")


def _guarded(obj: object, descriptor: TestDescriptor) -> TestCallback:
    method_name = descriptor.method_name

    def invoke(test: Test) -> None:
        method = getattr(obj, method_name, None)
        if not callable(method):
            test.fail(f"Method {method_name} does not exist")
        method(test)

    return invoke
