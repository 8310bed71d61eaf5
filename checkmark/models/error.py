"""Models for classified test errors."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, TypeAlias


@dataclass(frozen=True, kw_only=True)
class StackFrame:
    """One call in a traceback.

    ``file`` and ``line`` locate the call site, while ``function_name`` and
    ``arguments`` describe the function that was called from there.
    """

    file: str
    line: int
    function_name: str
    arguments: Sequence[str] = ()

    @property
    def location(self) -> str:
        """Call site as ``file:line``."""
        return f"{self.file}:{self.line}"


@dataclass(frozen=True, kw_only=True)
class AssertionFailure:
    """A failed assertion predicate, located by the single call that made it."""

    message: str
    site_frame: StackFrame
    kind: Literal["assertion_failure"] = field(default="assertion_failure", init=False)


@dataclass(frozen=True, kw_only=True)
class UnhandledError:
    """Any other exception that escaped a test body."""

    message: str
    file: str
    line: int
    frames: Sequence[StackFrame] = ()
    kind: Literal["unhandled_error"] = field(default="unhandled_error", init=False)

    @property
    def location(self) -> str:
        """Raising site as ``file:line``."""
        return f"{self.file}:{self.line}"


ClassifiedError: TypeAlias = AssertionFailure | UnhandledError
