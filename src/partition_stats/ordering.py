"""Partial orderings used to judge sortedness.

An ordering only needs ``lteq`` and ``gt``. Neither is assumed to be the
complement of the other: for incomparable elements both may return False.
"""

from collections.abc import Callable
from typing import Any, Protocol


class PartialOrdering[T](Protocol):
    def lteq(self, a: T, b: T) -> bool: ...

    def gt(self, a: T, b: T) -> bool: ...


class NaturalOrdering:
    """Python's own comparison operators (subset order for sets)."""

    def lteq(self, a: Any, b: Any) -> bool:
        return a <= b

    def gt(self, a: Any, b: Any) -> bool:
        return a > b

    def __repr__(self) -> str:
        return "NaturalOrdering()"


class KeyOrdering:
    """Compare elements by ``key(element)`` using the natural ordering."""

    def __init__(self, key: Callable[[Any], Any]):
        self.key = key

    def lteq(self, a: Any, b: Any) -> bool:
        return self.key(a) <= self.key(b)

    def gt(self, a: Any, b: Any) -> bool:
        return self.key(a) > self.key(b)

    def __repr__(self) -> str:
        return f"KeyOrdering({self.key!r})"


class ReversedOrdering:
    """Flip another ordering, so descending runs count as sorted."""

    def __init__(self, base: PartialOrdering):
        self.base = base

    def lteq(self, a: Any, b: Any) -> bool:
        return self.base.lteq(b, a)

    def gt(self, a: Any, b: Any) -> bool:
        return self.base.gt(b, a)

    def __repr__(self) -> str:
        return f"ReversedOrdering({self.base!r})"


NATURAL = NaturalOrdering()
