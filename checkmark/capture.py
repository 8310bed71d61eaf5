"""Isolation of the side effects of a single test."""

import io
import warnings
from collections.abc import Sequence
from contextlib import ExitStack, redirect_stdout
from types import TracebackType
from typing import Literal, Self

from checkmark.models.result import DiagnosticRecord

_active_scope: "CaptureScope | None" = None


class CaptureScopeError(RuntimeError):
    """Raised on nested acquisition of a capture scope or an early read."""


class CaptureScope:
    """Captures stdout writes and warnings while a single test runs.

    The scope owns the process-wide ``sys.stdout`` and warnings state between
    ``__enter__`` and ``__exit__``. Leaving the scope, normally or through an
    exception, restores the previous state and freezes the captured data.
    Scopes do not nest.
    """

    def __init__(
        self,
        warnings_action: Literal["always", "default", "once", "module"] = "always",
    ) -> None:
        self._warnings_action = warnings_action
        self._stack: ExitStack | None = None
        self._buffer = io.StringIO()
        self._records: list[warnings.WarningMessage] = []
        self._warnings: tuple[DiagnosticRecord, ...] | None = None
        self._output: str | None = None

    def __enter__(self) -> Self:
        global _active_scope

        if _active_scope is not None:
            raise CaptureScopeError("A capture scope is already active")
        if self._stack is not None or self._output is not None:
            raise CaptureScopeError("A capture scope can only be used once")

        with ExitStack() as stack:
            self._records = stack.enter_context(warnings.catch_warnings(record=True))
            warnings.simplefilter(self._warnings_action)
            stack.enter_context(redirect_stdout(self._buffer))
            self._stack = stack.pop_all()

        _active_scope = self
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        global _active_scope

        stack, self._stack = self._stack, None
        try:
            if stack is not None:
                stack.close()
        finally:
            _active_scope = None
            self._warnings = tuple(
                DiagnosticRecord(
                    file=record.filename,
                    line=record.lineno,
                    message=str(record.message),
                    category=record.category.__name__,
                )
                for record in self._records
            )
            self._output = self._buffer.getvalue()
            self._buffer.close()

    @property
    def warnings(self) -> Sequence[DiagnosticRecord]:
        """Warnings recorded during the scope, in emission order."""
        if self._warnings is None:
            raise CaptureScopeError("Captured warnings are available after release")
        return self._warnings

    @property
    def output(self) -> str:
        """Everything written to stdout during the scope."""
        if self._output is None:
            raise CaptureScopeError("Captured output is available after release")
        return self._output
