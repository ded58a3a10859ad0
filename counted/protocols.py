"""
Structural interfaces shared by counted collections.

This module defines:
1. Relation: the comparison applied per item by the set comparator
2. SupportsCounts: what the set comparator needs from an operand

Multiset and CountStore both satisfy SupportsCounts, so the comparison engine
works on either without knowing which it was given.
"""

from collections.abc import Hashable
from typing import Protocol


class Relation(Protocol):
    """Predicate over (count in left operand, count in right operand)."""

    def __call__(self, left: int, right: int) -> bool: ...


class SupportsCounts(Protocol):
    """
    Anything exposing distinct items and their counts.

    Counts of absent items must be reported as 0.
    """

    def items(self) -> list[Hashable]:
        """Distinct items in insertion order."""
        ...

    def count(self, item: Hashable) -> int:
        """Count of item, 0 if absent."""
        ...
