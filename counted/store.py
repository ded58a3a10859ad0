"""
Canonical item -> count storage.

CountStore is the single place where counts are written. Every stored count
is a strictly positive int; writing zero or less removes the item. The
backing dict keeps items in first-insertion order, which is the iteration
order of every collection built on top of it.
"""

import math
import numbers
from collections.abc import Hashable, Iterator

from .errors import InvalidArgumentError


def resolve_count(number) -> int | None:
    """
    Resolve a caller-supplied quantity to an int.

    Args:
        number: An int, any other real number (truncated toward zero) or None

    Returns:
        The resolved int, or None when number is None

    Raises:
        InvalidArgumentError: If number is not a finite real number
    """
    if number is None:
        return None
    if isinstance(number, numbers.Integral):
        return int(number)
    if isinstance(number, numbers.Real):
        if not math.isfinite(number):
            raise InvalidArgumentError(f"Count must be finite, got {number!r}")
        return int(number)
    raise InvalidArgumentError(
        f"Count must be an integer-like number, got {type(number).__name__}"
    )


class CountStore:
    """
    Insertion-ordered mapping from item to positive count.

    Removing an item and adding it again moves it to the end of the order.
    """

    def __init__(self):
        self._entries: dict[Hashable, int] = {}

    def count(self, item: Hashable) -> int:
        """Return the stored count of item, 0 if absent."""
        return self._entries.get(item, 0)

    def total(self) -> int:
        """Sum of all stored counts."""
        return sum(self._entries.values())

    def renew(self, item: Hashable, number) -> bool | None:
        """
        Set the count of item.

        Args:
            item: Item to update
            number: New count; zero or less removes the item

        Returns:
            True on success, None if number is None (nothing changes)

        Raises:
            InvalidArgumentError: If number is not integer-like
        """
        n = resolve_count(number)
        if n is None:
            return None
        if n > 0:
            self._entries[item] = n
        else:
            self._entries.pop(item, None)
        return True

    def discard(self, item: Hashable) -> None:
        """Remove item if present."""
        self._entries.pop(item, None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> list[Hashable]:
        """Distinct items in insertion order."""
        return list(self._entries)

    def iter_items(self) -> Iterator[Hashable]:
        return iter(self._entries)

    def iter_pairs(self) -> Iterator[tuple[Hashable, int]]:
        return iter(self._entries.items())

    def pairs(self) -> list[tuple[Hashable, int]]:
        """Snapshot of (item, count) pairs in insertion order."""
        return list(self._entries.items())

    def copy(self) -> "CountStore":
        """Independent copy of the storage (items themselves are shared)."""
        other = CountStore()
        other._entries = dict(self._entries)
        return other

    def to_dict(self) -> dict[Hashable, int]:
        return dict(self._entries)

    def __contains__(self, item: Hashable) -> bool:
        return item in self._entries

    def __len__(self) -> int:
        """Number of distinct items."""
        return len(self._entries)
