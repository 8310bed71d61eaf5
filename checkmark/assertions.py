"""Assertion predicates available to tests through the ``Test`` handle."""

import time
from collections.abc import Callable, Collection, Mapping
from typing import Any, NoReturn


class TestAssertionError(AssertionError):
    """Raised by assertion predicates when a check does not hold.

    The executor classifies this exception kind as an assertion failure; every
    other exception escaping a test is reported as an unhandled error.
    """

    __test__ = False


class Assertions:
    """Flat set of comparison checks."""

    def fail(self, message: str) -> NoReturn:
        """Fail the test unconditionally."""
        raise TestAssertionError(message)

    def fatal(self, message: str) -> NoReturn:
        """Abort the test with an ordinary (non-assertion) error."""
        raise RuntimeError(message)

    # Equality

    def assert_equal(self, a: Any, b: Any) -> None:
        if a != b:
            self.fail(f"{a!r} != {b!r}")

    def assert_not_equal(self, a: Any, b: Any) -> None:
        if a == b:
            self.fail(f"{a!r} == {b!r}")

    def assert_same(self, a: Any, b: Any) -> None:
        """Check that both arguments are the same object."""
        if a is not b:
            self.fail(f"{a!r} is not {b!r}")

    def assert_not_same(self, a: Any, b: Any) -> None:
        if a is b:
            self.fail(f"{a!r} is {b!r}")

    # Nullity

    def assert_none(self, a: Any) -> None:
        if a is not None:
            self.fail(f"{a!r} is not None")

    def assert_not_none(self, a: Any) -> None:
        if a is None:
            self.fail("Value is None")

    # Booleans

    def assert_true(self, a: Any) -> None:
        """Check that ``a`` is exactly ``True`` (truthy values do not count)."""
        if a is not True:
            self.fail("Not true")

    def assert_false(self, a: Any) -> None:
        if a is not False:
            self.fail("Not false")

    # Ordering

    def assert_greater_than(self, a: Any, b: Any) -> None:
        if a <= b:
            self.fail(f"{a!r} <= {b!r}")

    def assert_greater_than_or_equal(self, a: Any, b: Any) -> None:
        if a < b:
            self.fail(f"{a!r} < {b!r}")

    def assert_less_than(self, a: Any, b: Any) -> None:
        if a >= b:
            self.fail(f"{a!r} >= {b!r}")

    def assert_less_than_or_equal(self, a: Any, b: Any) -> None:
        if a > b:
            self.fail(f"{a!r} > {b!r}")

    # Strings

    def assert_contains(self, a: str, b: str) -> None:
        if b not in a:
            self.fail(f"{a!r} does not contain {b!r}")

    def assert_not_contains(self, a: str, b: str) -> None:
        if b in a:
            self.fail(f"{a!r} contains {b!r}")

    def assert_starts_with(self, a: str, b: str) -> None:
        if not a.startswith(b):
            self.fail(f"{a!r} does not start with {b!r}")

    def assert_not_starts_with(self, a: str, b: str) -> None:
        if a.startswith(b):
            self.fail(f"{a!r} starts with {b!r}")

    def assert_ends_with(self, a: str, b: str) -> None:
        if not a.endswith(b):
            self.fail(f"{a!r} does not end with {b!r}")

    def assert_not_ends_with(self, a: str, b: str) -> None:
        if a.endswith(b):
            self.fail(f"{a!r} ends with {b!r}")

    # Collections

    def assert_collection_equal(self, a: Collection[Any], b: Collection[Any]) -> None:
        if a != b:
            self.fail("Collections are not equal")

    def assert_collection_not_equal(
        self, a: Collection[Any], b: Collection[Any]
    ) -> None:
        if a == b:
            self.fail("Collections are equal")

    def assert_collection_contains(self, a: Collection[Any], b: Any) -> None:
        if b not in a:
            self.fail(f"Collection does not contain {b!r}")

    def assert_collection_not_contains(self, a: Collection[Any], b: Any) -> None:
        if b in a:
            self.fail(f"Collection contains {b!r}")

    def assert_has_key(self, a: Mapping[Any, Any], key: Any) -> None:
        if key not in a:
            self.fail(f"Mapping does not contain key {key!r}")

    def assert_not_has_key(self, a: Mapping[Any, Any], key: Any) -> None:
        if key in a:
            self.fail(f"Mapping contains key {key!r}")

    def assert_empty(self, a: Collection[Any]) -> None:
        if len(a) != 0:
            self.fail("Collection is not empty")

    def assert_not_empty(self, a: Collection[Any]) -> None:
        if len(a) == 0:
            self.fail("Collection is empty")

    # Exceptions

    def assert_raises(
        self,
        callback: Callable[[], Any],
        exception_type: type[BaseException] = Exception,
    ) -> None:
        """Check that ``callback`` raises ``exception_type``."""
        try:
            callback()
        except exception_type:
            return
        self.fail(f"{exception_type.__name__} not raised")

    def assert_not_raises(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as e:
            self.fail(f"Exception raised: {type(e).__name__}: {e}")

    # Timing

    def assert_timeout(self, seconds: float, callback: Callable[[], Any]) -> None:
        """Check that ``callback`` returned within ``seconds``.

        The elapsed time is measured after the call returns; a call that never
        returns is not interrupted.
        """
        start = time.perf_counter()
        callback()
        elapsed = time.perf_counter() - start
        if elapsed > seconds:
            self.fail(f"Timeout after {elapsed:.3f} seconds")

    # Types

    def assert_type(self, a: Any, type_name: str) -> None:
        """Check that the type of ``a`` is named ``type_name``."""
        if type(a).__name__ != type_name:
            self.fail(f"{a!r} is not of type {type_name}")

    def assert_not_type(self, a: Any, type_name: str) -> None:
        if type(a).__name__ == type_name:
            self.fail(f"{a!r} is of type {type_name}")

    def assert_instance_of(self, a: Any, cls: type[Any]) -> None:
        if not isinstance(a, cls):
            self.fail(f"{a!r} is not an instance of {cls.__name__}")

    def assert_not_instance_of(self, a: Any, cls: type[Any]) -> None:
        if isinstance(a, cls):
            self.fail(f"{a!r} is an instance of {cls.__name__}")


class Test(Assertions):
    """Handle passed to every test callback.

    Test methods discovered on a class must annotate their single parameter
    with exactly this type.
    """

    __test__ = False
