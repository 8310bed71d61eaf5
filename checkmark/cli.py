"""CLI entry point for running docstring-marked test classes."""

import argparse
import importlib
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from checkmark.config import RunnerConfig
from checkmark.config_loader import load_config
from checkmark.discovery import MethodFilteringError
from checkmark.models.report import SuiteRecord
from checkmark.models.result import SuiteSummary
from checkmark.reporter import render_configuration_error, render_suite
from checkmark.suite import build_class_suite

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_CONFIGURATION_ERROR = 2

STATUS_SYMBOLS = {
    True: "✓",
    False: "✗",
}


class TargetNotFoundError(Exception):
    """Raised when a test target cannot be imported or instantiated."""


def load_target(target: str) -> object:
    """Import ``package.module:ClassName`` and instantiate the class.

    Raises:
        TargetNotFoundError: If the target is malformed, its module cannot be
            imported or the module has no such class

    """
    module_name, separator, class_name = target.partition(":")
    if not separator or not module_name or not class_name:
        raise TargetNotFoundError(
            f"Invalid target '{target}'. Expected 'package.module:ClassName'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetNotFoundError(f"Cannot import module '{module_name}': {e}") from e

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise TargetNotFoundError(
            f"Module '{module_name}' has no class named '{class_name}'"
        )

    return cls()


def log_results_summary(
    log: logging.Logger, summaries: Sequence[SuiteSummary]
) -> None:
    """Log a formatted summary of suite results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for summary in summaries:
        log.info(
            "Suite %s: %d/%d passed",
            summary.suite_name,
            summary.passed_count,
            summary.total,
        )
        for outcome in summary.outcomes:
            log.info(
                "  %s %s (%.2fs)",
                STATUS_SYMBOLS[outcome.passed],
                outcome.name,
                outcome.duration,
            )


def format_output(summaries: Sequence[SuiteSummary]) -> dict[str, Any]:
    """Format suite results for JSON output."""
    suites = [
        SuiteRecord.from_summary(summary).model_dump(mode="json")
        for summary in summaries
    ]
    return {
        "total": sum(suite["total"] for suite in suites),
        "passed": sum(suite["passed"] for suite in suites),
        "failed": sum(suite["failed"] for suite in suites),
        "suites": suites,
    }


def run(
    targets: Sequence[str],
    config: RunnerConfig,
    display_name: str | None = None,
    json_output: bool = False,
) -> int:
    """Run each target as a suite and return the exit code."""
    log = logging.getLogger("checkmark")
    summaries: list[SuiteSummary] = []

    for target in targets:
        try:
            obj = load_target(target)
        except TargetNotFoundError as e:
            log.error("%s", e)
            return EXIT_CONFIGURATION_ERROR

        try:
            summary = build_class_suite(obj, display_name, config=config)
        except MethodFilteringError as e:
            log.error("Test discovery failed for %s: %s", target, e)
            print(render_configuration_error(display_name or target, e), end="")
            return EXIT_CONFIGURATION_ERROR

        if not json_output:
            print(render_suite(summary), end="")
        summaries.append(summary)

    log_results_summary(log, summaries)

    if json_output:
        print(json.dumps(format_output(summaries), indent=2))

    has_failures = any(summary.failed_count for summary in summaries)
    return EXIT_FAILED if has_failures else EXIT_PASSED


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run the docstring-marked test methods of one or more classes"
    )
    parser.add_argument(
        "targets",
        nargs="+",
        metavar="TARGET",
        help="Test class to run, as package.module:ClassName",
    )
    parser.add_argument(
        "--display-name",
        default=None,
        help="Suite name to report instead of the class name",
    )
    config_group = parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--config",
        default=None,
        help="JSON runner configuration",
    )
    config_group.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to a YAML runner configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of text reports",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.config_file is not None:
        config = load_config(args.config_file)
    elif args.config is not None:
        config = RunnerConfig.model_validate_json(args.config)
    else:
        config = RunnerConfig()

    exit_code = run(
        targets=args.targets,
        config=config,
        display_name=args.display_name,
        json_output=args.json,
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
