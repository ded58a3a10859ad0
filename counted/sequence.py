"""
Restartable lazy sequences.

Iteration methods called without a callback return a LazySequence instead of
doing any work. Each call to iter() starts a fresh traversal of the owning
collection, so the sequence can be consumed any number of times and always
reflects the collection's current contents.
"""

from collections.abc import Callable, Iterable, Iterator


class LazySequence(Iterable):
    """
    Finite, restartable view over a traversal.

    The traversal is produced by a zero-argument factory that returns a new
    iterator each time it is called.
    """

    def __init__(self, factory: Callable[[], Iterator], label: str = "sequence"):
        self._factory = factory
        self._label = label

    def __iter__(self) -> Iterator:
        return self._factory()

    def to_list(self) -> list:
        return list(self)

    def __repr__(self) -> str:
        return f"<LazySequence {self._label}>"
