"""Tests for exception classification and traceback extraction."""

from pathlib import Path

import pytest

import checkmark
from checkmark.assertions import Test, TestAssertionError
from checkmark.models.error import AssertionFailure, StackFrame, UnhandledError
from checkmark.tracebacks import (
    classify,
    filter_frames,
    is_internal,
    render_argument,
)

PACKAGE_DIR = Path(checkmark.__file__).resolve().parent


def _raise_from(callback: object, *args: object) -> Exception:
    try:
        callback(*args)  # type: ignore[operator]
    except Exception as e:
        return e
    raise AssertionError("callback did not raise")  # pragma: no cover


class Widget:
    """Arbitrary object used as an argument."""


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("text", "'text'"),
        ("", "''"),
        ([1, 2], "[...]"),
        ((1,), "[...]"),
        ({"a": 1}, "[...]"),
        ({1}, "[...]"),
        (42, "42"),
        (1.5, "1.5"),
        (True, "True"),
        (None, "None"),
        (Widget(), "Widget"),
    ],
)
def test_render_argument(value: object, expected: str) -> None:
    """Renders strings quoted, collections as a placeholder, objects by type."""
    assert render_argument(value) == expected


def test_is_internal() -> None:
    """Treats files inside the package directory as internal."""
    assert is_internal(str(PACKAGE_DIR / "executor.py"))
    assert is_internal(str(PACKAGE_DIR / "models" / "result.py"))
    assert not is_internal(__file__)
    assert not is_internal("<string>")


@pytest.mark.parametrize(("total", "internal"), [(0, 0), (3, 0), (3, 2), (5, 5)])
def test_filter_frames_drops_internal_prefix(total: int, internal: int) -> None:
    """Keeps exactly the external frames, in order."""
    frames = [
        StackFrame(
            file=str(PACKAGE_DIR / "executor.py") if index < internal else __file__,
            line=index,
            function_name=f"f{index}",
        )
        for index in range(total)
    ]

    kept = filter_frames(frames)

    assert [frame.line for frame in kept] == list(range(internal, total))


def test_classify_assertion_failure_points_at_predicate_call() -> None:
    """Locates the line that called the failing predicate."""

    def body(test: Test) -> None:
        test.assert_equal(1, 1)
        test.assert_equal(1, 2)

    error = classify(_raise_from(body, Test()))

    assert isinstance(error, AssertionFailure)
    assert error.message == "1 != 2"
    assert error.site_frame.file == __file__
    assert error.site_frame.line == body.__code__.co_firstlineno + 2
    assert error.site_frame.function_name == "assert_equal"
    assert error.site_frame.arguments == ("1", "2")


def test_classify_assertion_failure_through_helper() -> None:
    """Uses the helper's call to the predicate as the site."""

    def check_positive(test: Test, value: int) -> None:
        test.assert_greater_than(value, 0)

    def body(test: Test) -> None:
        check_positive(test, -3)

    error = classify(_raise_from(body, Test()))

    assert isinstance(error, AssertionFailure)
    assert error.site_frame.line == check_positive.__code__.co_firstlineno + 1
    assert error.site_frame.arguments == ("-3", "0")


def test_classify_direct_assertion_error_uses_innermost_frame() -> None:
    """Falls back to the raising frame when no predicate was involved."""

    def body(label: str) -> None:
        raise TestAssertionError(f"bad {label}")

    error = classify(_raise_from(body, "thing"))

    assert isinstance(error, AssertionFailure)
    assert error.message == "bad thing"
    assert error.site_frame.function_name == "body"
    assert error.site_frame.arguments == ("'thing'",)
    assert error.site_frame.line == body.__code__.co_firstlineno + 1


def test_classify_builtin_assert_is_unhandled() -> None:
    """Does not treat a plain AssertionError as a predicate failure."""

    def body() -> None:
        raise AssertionError("plain assert")

    error = classify(_raise_from(body))

    assert isinstance(error, UnhandledError)
    assert error.message == "AssertionError: plain assert"


def test_classify_unhandled_error_frames() -> None:
    """Lists caller frames innermost first with the callee arguments."""

    def parse(value: str, options: dict[str, int]) -> int:
        return int(value)

    def load(path: str) -> int:
        return parse(path, {"base": 10})

    error = classify(_raise_from(load, "nope"))

    assert isinstance(error, UnhandledError)
    assert error.message.startswith("ValueError: invalid literal for int()")
    assert error.file == __file__
    assert error.line == parse.__code__.co_firstlineno + 1
    assert [frame.function_name for frame in error.frames][:3] == [
        "parse",
        "load",
        "_raise_from",
    ]
    assert error.frames[0].arguments == ("'nope'", "[...]")
    assert error.frames[0].line == load.__code__.co_firstlineno + 1
    assert error.frames[1].arguments == ("'nope'",)


def test_classify_unhandled_error_reaches_outer_callers() -> None:
    """Lists the callers of the catching frame after the traceback frames."""

    def fail() -> None:
        raise RuntimeError("down")

    error = classify(_raise_from(fail))

    assert isinstance(error, UnhandledError)
    names = [frame.function_name for frame in error.frames]
    assert names[:2] == ["fail", "_raise_from"]
    assert names[2] == "test_classify_unhandled_error_reaches_outer_callers"
    assert error.frames[1].file == __file__


def test_classify_system_exit() -> None:
    """Classifies SystemExit like any other unhandled error."""

    def leave() -> None:
        raise SystemExit(3)

    try:
        leave()
    except SystemExit as e:
        error = classify(e)

    assert isinstance(error, UnhandledError)
    assert error.message == "SystemExit: 3"
    assert error.line == leave.__code__.co_firstlineno + 1
