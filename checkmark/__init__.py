"""Minimal test runner with docstring-marked test discovery."""

from checkmark.assertions import Test, TestAssertionError
from checkmark.config import RunnerConfig
from checkmark.discovery import MethodFilteringError, TestDescriptor, discover_tests
from checkmark.executor import execute, run_test
from checkmark.models.result import TestOutcome
from checkmark.reporter import render_outcome, render_suite
from checkmark.suite import (
    build_class_suite,
    build_suite,
    run_suite,
    run_suite_from_annotated_methods,
)

__all__ = [
    "MethodFilteringError",
    "RunnerConfig",
    "Test",
    "TestAssertionError",
    "TestDescriptor",
    "TestOutcome",
    "build_class_suite",
    "build_suite",
    "discover_tests",
    "execute",
    "render_outcome",
    "render_suite",
    "run_suite",
    "run_suite_from_annotated_methods",
    "run_test",
]
