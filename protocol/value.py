"""Witness value wrapper: a cell value is either Unassigned or Known.

The same circuit code runs for full synthesis (all values Known) and for
setup-only flows built from `without_witnesses()` (values Unassigned), so
circuits never need two parallel APIs.
"""

from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

from protocol.errors import SynthesisError

T = TypeVar("T")
U = TypeVar("U")


class Value(Generic[T]):
    """Either Known(v) or Unassigned."""

    __slots__ = ("_inner", "_known")

    def __init__(self, inner: Optional[T], known: bool):
        self._inner = inner
        self._known = known

    @classmethod
    def known(cls, value: T) -> "Value[T]":
        return cls(value, True)

    @classmethod
    def unknown(cls) -> "Value[Any]":
        return cls(None, False)

    def is_known(self) -> bool:
        return self._known

    def map(self, fn: Callable[[T], U]) -> "Value[U]":
        """Apply fn to a Known value; Unassigned stays Unassigned."""
        if not self._known:
            return Value.unknown()
        return Value.known(fn(self._inner))

    def zip(self, other: "Value[U]") -> "Value[Tuple[T, U]]":
        if self._known and other._known:
            return Value.known((self._inner, other._inner))
        return Value.unknown()

    def assign(self) -> T:
        """Return the inner value, or raise SynthesisError if Unassigned."""
        if not self._known:
            raise SynthesisError("value is unassigned but a witness is required")
        return self._inner

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._known != other._known:
            return False
        return not self._known or bool(self._inner == other._inner)

    def __repr__(self) -> str:
        if self._known:
            return f"Value.known({self._inner!r})"
        return "Value.unknown()"
