"""Tests for capture scopes."""

import sys
import warnings

import pytest

from checkmark.capture import CaptureScope, CaptureScopeError


def test_captures_stdout() -> None:
    """Buffers prints instead of writing them to stdout."""
    with CaptureScope() as scope:
        print("hello")
        sys.stdout.write("world")

    assert scope.output == "hello\nworld"


def test_restores_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Writes reach the original stdout again after release."""
    original = sys.stdout

    with CaptureScope():
        print("inside")

    print("outside")

    assert sys.stdout is original
    assert capsys.readouterr().out == "outside\n"


def test_records_warnings_in_order() -> None:
    """Records each warning with its file, line and category."""
    with CaptureScope() as scope:
        warnings.warn("first", DeprecationWarning, stacklevel=1)
        warnings.warn("second", stacklevel=1)

    assert [record.message for record in scope.warnings] == ["first", "second"]
    assert scope.warnings[0].category == "DeprecationWarning"
    assert scope.warnings[1].category == "UserWarning"
    assert scope.warnings[0].file == __file__
    assert scope.warnings[0].line > 0


def test_records_repeated_warnings() -> None:
    """Records a warning every time it is emitted."""
    with CaptureScope() as scope:
        for _ in range(3):
            warnings.warn("again", stacklevel=1)

    assert len(scope.warnings) == 3


def test_warnings_raised_as_errors_outside_are_recorded_inside() -> None:
    """Overrides an outer "error" filter for the duration of the scope."""
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        with CaptureScope() as scope:
            warnings.warn("not fatal", stacklevel=1)

    assert [record.message for record in scope.warnings] == ["not fatal"]


def test_restores_warning_filters() -> None:
    """Leaves the warning filters as they were before the scope."""
    before = list(warnings.filters)

    with CaptureScope():
        warnings.simplefilter("ignore")

    assert warnings.filters == before


def test_releases_on_exception() -> None:
    """Restores state and freezes captured data when the body raises."""
    original = sys.stdout
    scope = CaptureScope()

    with pytest.raises(ValueError, match="boom"), scope:
        print("partial")
        raise ValueError("boom")

    assert sys.stdout is original
    assert scope.output == "partial\n"

    with CaptureScope():
        pass


def test_rejects_nested_scopes() -> None:
    """Raises on acquisition while another scope is active."""
    with CaptureScope():
        with pytest.raises(CaptureScopeError, match="already active"):
            CaptureScope().__enter__()
        print("still captured")


def test_rejects_reuse() -> None:
    """Raises when a released scope is entered again."""
    scope = CaptureScope()
    with scope:
        pass

    with pytest.raises(CaptureScopeError, match="only be used once"):
        scope.__enter__()


def test_rejects_reads_before_release() -> None:
    """Captured data is only available once the scope is released."""
    with CaptureScope() as scope:
        with pytest.raises(CaptureScopeError):
            _ = scope.output
        with pytest.raises(CaptureScopeError):
            _ = scope.warnings
