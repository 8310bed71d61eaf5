"""Discovery of test methods marked in docstrings."""

import inspect
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import cache
from typing import Any, Literal, TypeAlias
from weakref import WeakKeyDictionary

from checkmark.assertions import Test
from checkmark.config import DEFAULT_MARKER

log = logging.getLogger(__name__)

FilteringErrorKind: TypeAlias = Literal[
    "NOT_PUBLIC",
    "INCORRECT_PARAMETERS",
    "NO_TYPE_HINT",
    "INCORRECT_TYPE_HINT",
]

FILTERING_ERROR_MESSAGES: Mapping[FilteringErrorKind, str] = {
    "NOT_PUBLIC": "Method {name} is marked as a test but it is not public.",
    "INCORRECT_PARAMETERS": (
        "Method {name} is marked as a test but it has an incorrect number "
        "of parameters."
    ),
    "NO_TYPE_HINT": "Method {name} is marked as a test but has no type hint.",
    "INCORRECT_TYPE_HINT": (
        "Method {name} is marked as a test but has incorrect type hint {hint}."
    ),
}

HANDLE_NAMES = frozenset(
    {Test.__name__, f"checkmark.{Test.__name__}", f"{Test.__module__}.{Test.__name__}"}
)

POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class MethodFilteringError(Exception):
    """Raised when a method marked as a test cannot be run as one."""

    def __init__(
        self, kind: FilteringErrorKind, method_name: str, hint: str = ""
    ) -> None:
        self.kind = kind
        self.method_name = method_name
        super().__init__(
            FILTERING_ERROR_MESSAGES[kind].format(name=method_name, hint=hint)
        )


@dataclass(frozen=True, kw_only=True)
class MethodEntry:
    """Static description of one method of a class.

    ``parameters`` excludes the bound ``self`` or ``cls`` and is only resolved
    for marked methods.
    """

    name: str
    function: Callable[..., Any]
    is_test: bool
    display_name: str | None
    parameters: Sequence[inspect.Parameter]


_method_tables: WeakKeyDictionary[type, dict[str, tuple[MethodEntry, ...]]] = (
    WeakKeyDictionary()
)


@dataclass(frozen=True, kw_only=True)
class TestDescriptor:
    """A discovered test bound to the object it was discovered on.

    ``invocable`` is ``None`` when the object no longer has the method, e.g.
    because it was deleted from the class after its table was built.
    """

    __test__ = False

    display_name: str
    method_name: str
    invocable: Callable[[Test], Any] | None


def discover_tests(
    obj: object, *, marker: str = DEFAULT_MARKER
) -> list[TestDescriptor]:
    """Collect the marked test methods of ``obj`` in declaration order.

    Args:
        obj: Instance whose methods are inspected
        marker: Docstring token marking a method as a test

    Returns:
        One descriptor per marked method, possibly none

    Raises:
        MethodFilteringError: For the first marked method, in declaration
            order, that is not public, does not take exactly one parameter,
            or does not annotate it with ``Test``

    """
    descriptors: list[TestDescriptor] = []
    for entry in describe_type(type(obj), marker):
        if not entry.is_test:
            continue
        validate_entry(entry)
        descriptors.append(
            TestDescriptor(
                display_name=entry.display_name or entry.name,
                method_name=entry.name,
                invocable=getattr(obj, entry.name, None),
            )
        )

    log.debug("Discovered %d test(s) on %s", len(descriptors), type(obj).__qualname__)
    return descriptors


def describe_type(
    cls: type, marker: str = DEFAULT_MARKER
) -> tuple[MethodEntry, ...]:
    """Return the ordered method table of ``cls``.

    The class's own methods come first in definition order, followed by
    inherited ones along the MRO. The table is computed once per class and
    marker, and is dropped together with the class.
    """
    tables = _method_tables.setdefault(cls, {})
    if marker not in tables:
        tables[marker] = _build_table(cls, marker)
    return tables[marker]


def _build_table(cls: type, marker: str) -> tuple[MethodEntry, ...]:
    pattern = marker_pattern(marker)
    entries: list[MethodEntry] = []
    seen: set[str] = set()

    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, attribute in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if (function := _unwrap(attribute)) is None:
                continue

            match = pattern.search(inspect.cleandoc(function.__doc__ or ""))
            entries.append(
                MethodEntry(
                    name=name,
                    function=function,
                    is_test=match is not None,
                    display_name=match["name"] if match else None,
                    parameters=_parameters(attribute, function) if match else (),
                )
            )

    return tuple(entries)


@cache
def marker_pattern(marker: str) -> re.Pattern[str]:
    """Match a docstring line holding ``marker`` and an optional display name."""
    return re.compile(
        rf"^[ \t]*{re.escape(marker)}(?:[ \t]+(?P<name>\S.*?))?[ \t]*$",
        re.MULTILINE,
    )


def validate_entry(entry: MethodEntry) -> None:
    """Check that a marked method can be called with a ``Test`` handle."""
    if entry.name.startswith("_"):
        raise MethodFilteringError("NOT_PUBLIC", entry.name)

    if len(entry.parameters) != 1 or entry.parameters[0].kind not in POSITIONAL:
        raise MethodFilteringError("INCORRECT_PARAMETERS", entry.name)

    annotation = entry.parameters[0].annotation
    if annotation is inspect.Parameter.empty:
        raise MethodFilteringError("NO_TYPE_HINT", entry.name)

    if not _is_handle(annotation):
        raise MethodFilteringError(
            "INCORRECT_TYPE_HINT", entry.name, hint=_annotation_name(annotation)
        )


def _unwrap(attribute: Any) -> Callable[..., Any] | None:
    if isinstance(attribute, staticmethod | classmethod):
        return attribute.__func__
    if inspect.isfunction(attribute):
        return attribute
    return None


def _parameters(
    attribute: Any, function: Callable[..., Any]
) -> tuple[inspect.Parameter, ...]:
    try:
        signature = inspect.signature(function, eval_str=True)
    except Exception:
        # Unresolvable string annotations are compared by name.
        signature = inspect.signature(function)

    parameters = tuple(signature.parameters.values())
    if isinstance(attribute, staticmethod):
        return parameters
    return parameters[1:]


def _is_handle(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation in HANDLE_NAMES
    return annotation is Test


def _annotation_name(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return annotation.__qualname__
    return str(annotation)
