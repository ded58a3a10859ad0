"""
counted: multisets and multimaps.

A Multiset stores each distinct hashable item with a positive count; a
Multimap associates keys with Multiset buckets.

Modules:
- store: CountStore, the canonical item -> positive count mapping
- compare: the relational engine behind ==, subset and superset tests
- sources: explicit construction variants (CountedPairs, RawItems, TextLines)
- sequence: restartable lazy sequences returned by callback-less iteration
- multiset: Multiset and to_multiset()
- multimap: Multimap, to_multimap() and multimap_of()
- errors: exceptions for loud failures

Quiet failures (adding a non-positive count, deleting an absent item, a
destructive filter that removes nothing) return None rather than raising.

Neither collection is thread-safe; callers sharing an instance across
threads must serialize access themselves.
"""

from .errors import CyclicNestingError, InvalidArgumentError, TypeMismatchError
from .sources import CountedPairs, RawItems, TextLines, classify_source
from .sequence import LazySequence
from .store import CountStore
from .multiset import Multiset, to_multiset
from .multimap import Multimap, multimap_of, to_multimap

__version__ = "0.1.0"
__all__ = [
    "CountStore",
    "CountedPairs",
    "CyclicNestingError",
    "InvalidArgumentError",
    "LazySequence",
    "Multimap",
    "Multiset",
    "RawItems",
    "TextLines",
    "TypeMismatchError",
    "classify_source",
    "multimap_of",
    "to_multimap",
    "to_multiset",
]
