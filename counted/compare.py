"""
Relational comparison of counted collections.

One engine, parametrized by the per-item relation, backs equality, subset,
superset and their proper variants. The engine walks the union of distinct
items: the left operand's items in insertion order, then the right operand's
items not already seen.
"""

import operator
from collections.abc import Hashable, Iterator

from .protocols import Relation, SupportsCounts

SUPERSET: Relation = operator.ge
SUBSET: Relation = operator.le
EQUAL: Relation = operator.eq


def union_items(left: SupportsCounts, right: SupportsCounts) -> Iterator[Hashable]:
    """
    Yield each distinct item of either operand exactly once.

    Args:
        left: First operand, visited first in its insertion order
        right: Second operand, only items missing from left

    Yields:
        Distinct items
    """
    seen = set()
    for item in left.items():
        seen.add(item)
        yield item
    for item in right.items():
        if item not in seen:
            yield item


def compare_set_with(
    left: SupportsCounts, right: SupportsCounts, relation: Relation
) -> bool:
    """
    Check relation(left.count(i), right.count(i)) for every item i of either side.

    Short-circuits on the first item for which relation fails.

    Args:
        left: Left operand
        right: Right operand
        relation: Per-item predicate over the two counts

    Returns:
        True if relation holds for every item
    """
    for item in union_items(left, right):
        if not relation(left.count(item), right.count(item)):
            return False
    return True


def is_proper(left: SupportsCounts, right: SupportsCounts, relation: Relation) -> bool:
    """relation holds for every item and the operands are not equal."""
    return compare_set_with(left, right, relation) and not compare_set_with(
        left, right, EQUAL
    )
