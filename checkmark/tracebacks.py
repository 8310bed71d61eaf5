"""Classification of exceptions escaping a test and traceback extraction."""

import inspect
import traceback
from collections.abc import Sequence
from itertools import pairwise
from pathlib import Path
from types import FrameType
from typing import Any

from checkmark.assertions import TestAssertionError
from checkmark.models.error import (
    AssertionFailure,
    ClassifiedError,
    StackFrame,
    UnhandledError,
)

PACKAGE_ROOT = Path(__file__).resolve().parent
ASSERTIONS_MODULE = "checkmark.assertions"
COLLECTION_PLACEHOLDER = "[...]"


def classify(exc: BaseException) -> ClassifiedError:
    """Convert an exception caught by the executor into outcome data.

    The traceback of an unhandled error runs from the raising frame out to the
    outermost frame of the program, not just to the frame that caught it.
    """
    calls = list(traceback.walk_tb(exc.__traceback__))

    if isinstance(exc, TestAssertionError):
        return AssertionFailure(message=str(exc), site_frame=assertion_site(calls))

    if calls:
        raising_frame, raising_line = calls[-1]
        file, line = raising_frame.f_code.co_filename, raising_line
    else:  # pragma: no cover
        file, line = "<unknown>", 0

    frames = extract_frames([*enclosing_calls(calls), *calls])
    return UnhandledError(
        message=f"{type(exc).__name__}: {exc}",
        file=file,
        line=line,
        frames=tuple(filter_frames(frames)),
    )


def extract_frames(calls: Sequence[tuple[FrameType, int]]) -> list[StackFrame]:
    """Pair each call site with the function it called, innermost first.

    ``calls`` is ordered from the outermost frame inwards, as produced by
    ``traceback.walk_tb``.
    """
    frames = [
        _call(caller, line, callee) for (caller, line), (callee, _) in pairwise(calls)
    ]
    frames.reverse()
    return frames


def enclosing_calls(
    calls: Sequence[tuple[FrameType, int]],
) -> list[tuple[FrameType, int]]:
    """Return the frames enclosing the catching frame, outermost first."""
    if not calls or (caller := calls[0][0].f_back) is None:
        return []
    outer = list(traceback.walk_stack(caller))
    outer.reverse()
    return outer


def assertion_site(calls: Sequence[tuple[FrameType, int]]) -> StackFrame:
    """Locate the call that invoked the failing assertion predicate.

    Falls back to the innermost frame when no predicate is on the stack,
    e.g. when a ``TestAssertionError`` was raised directly.
    """
    for index, (frame, _) in enumerate(calls):
        if index > 0 and frame.f_globals.get("__name__") == ASSERTIONS_MODULE:
            caller, line = calls[index - 1]
            return _call(caller, line, frame)

    frame, line = calls[-1]
    return StackFrame(
        file=frame.f_code.co_filename,
        line=line,
        function_name=frame.f_code.co_name,
        arguments=frame_arguments(frame),
    )


def filter_frames(frames: Sequence[StackFrame]) -> list[StackFrame]:
    """Drop frames whose call site lives inside this package."""
    return [frame for frame in frames if not is_internal(frame.file)]


def is_internal(file: str) -> bool:
    """Check whether ``file`` belongs to the checkmark package."""
    return Path(file).resolve().is_relative_to(PACKAGE_ROOT)


def frame_arguments(frame: FrameType) -> tuple[str, ...]:
    """Render the current argument values of ``frame``."""
    info = inspect.getargvalues(frame)
    values: list[Any] = [
        info.locals[name]
        for position, name in enumerate(info.args)
        if name in info.locals and not (position == 0 and name in ("self", "cls"))
    ]
    if info.varargs and info.varargs in info.locals:
        values.extend(info.locals[info.varargs])
    if info.keywords and info.keywords in info.locals:
        values.extend(info.locals[info.keywords].values())
    return tuple(render_argument(value) for value in values)


def render_argument(value: Any) -> str:
    """Render a single argument value as a short token."""
    match value:
        case str():
            return f"'{value}'"
        case list() | tuple() | set() | frozenset() | dict():
            return COLLECTION_PLACEHOLDER
        case None | bool() | int() | float() | complex():
            return str(value)
        case _:
            return type(value).__name__


def _call(caller: FrameType, line: int, callee: FrameType) -> StackFrame:
    return StackFrame(
        file=caller.f_code.co_filename,
        line=line,
        function_name=callee.f_code.co_name,
        arguments=frame_arguments(callee),
    )
