"""
Exceptions raised by counted collections.

Loud failures only. Quiet failures (a non-positive delta to add, deleting an
absent item, a destructive call that changes nothing) are reported by
returning None instead.
"""


class InvalidArgumentError(ValueError):
    """An argument has a shape the operation cannot accept."""


class TypeMismatchError(InvalidArgumentError, TypeError):
    """An operand is not of the collection type the operation requires."""


class CyclicNestingError(InvalidArgumentError):
    """A nested multiset contains itself, directly or transitively."""
