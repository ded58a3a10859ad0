"""
Multiset: a collection in which each distinct item carries a positive count.

Items must be hashable. Distinct items are kept in first-insertion order and
every traversal, search and sort visits them in that order.

Two traversal styles coexist:
- Expanding: iter(ms) and each() visit an item once per unit of its count
- Distinct-once: each_item(), each_pair() and every transform, filter,
  search, classify and sort method visit each distinct item once, carrying
  its count over to the result

Destructive methods end in _update (or are delete_*). Most return the
receiver; reject_update() and flatten_update() return None when nothing
changed.

No internal locking is done. A multiset mutated from several threads must be
guarded by the caller.
"""

import logging
import re
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from functools import cmp_to_key
from itertools import repeat

from .compare import EQUAL, SUBSET, SUPERSET, compare_set_with, is_proper
from .errors import CyclicNestingError, InvalidArgumentError, TypeMismatchError
from .sequence import LazySequence
from .sources import (
    TEXT_HINT,
    CountedPairs,
    RawItems,
    Source,
    TextLines,
    classify_source,
    counted_pairs,
)
from .store import CountStore, resolve_count

logger = logging.getLogger(__name__)


def _matches(pattern, item) -> bool:
    """Case-equality used by grep()."""
    if isinstance(pattern, re.Pattern):
        return isinstance(item, str) and pattern.search(item) is not None
    if isinstance(pattern, type):
        return isinstance(item, pattern)
    if isinstance(pattern, (range, set, frozenset)):
        return item in pattern
    if callable(pattern):
        return bool(pattern(item))
    return pattern == item


def _expand(pairs: Iterable[tuple[Hashable, int]]) -> list:
    """Repeat each item by its count."""
    ret = []
    for item, count in pairs:
        ret.extend(repeat(item, count))
    return ret


class Multiset:
    """
    Counted collection of hashable items.

    Multisets are hashable by content so they can be nested inside other
    multisets; do not mutate a multiset while it is stored as an item.
    """

    def __init__(self, items: Iterable | None = None):
        """
        Create a multiset, empty or from items.

        Args:
            items: Iterable whose every element adds one occurrence

        Raises:
            InvalidArgumentError: If items is a str or is not iterable
        """
        self._store = CountStore()
        if items is None:
            return
        if isinstance(items, (str, bytes)):
            raise InvalidArgumentError(TEXT_HINT)
        if not isinstance(items, Iterable):
            raise InvalidArgumentError(
                f"Item list must be iterable, got {type(items).__name__}"
            )
        for item in items:
            self.add(item)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def of(cls, *items: Hashable) -> "Multiset":
        """Multiset of the positional arguments."""
        return cls(items)

    @classmethod
    def from_items(cls, items: Iterable) -> "Multiset":
        """Every element of items is one occurrence."""
        return cls(items)

    @classmethod
    def from_counts(cls, source) -> "Multiset":
        """
        Build from explicit (item, count) pairs.

        Non-positive counts are skipped and repeated items accumulate.

        Args:
            source: Multiset (copied as-is), Mapping of item -> count, or
                iterable of (item, count) pairs

        Raises:
            InvalidArgumentError: If source is a str, is not iterable, or a
                count is not integer-like
        """
        return cls.from_source(counted_pairs(source))

    @classmethod
    def from_text_lines(cls, text: str, keepends: bool = True) -> "Multiset":
        """
        Every line of text is one occurrence.

        Args:
            text: Text to split on line boundaries
            keepends: Keep line terminators on each item

        Raises:
            InvalidArgumentError: If text is not a str
        """
        if not isinstance(text, str):
            raise InvalidArgumentError(
                f"Expected text, got {type(text).__name__}"
            )
        return cls.from_source(TextLines(text, keepends))

    @classmethod
    def from_source(cls, source: Source) -> "Multiset":
        """
        Build from an explicit source variant.

        Args:
            source: CountedPairs, RawItems or TextLines

        Raises:
            InvalidArgumentError: If source is none of the variants
        """
        ret = cls()
        if isinstance(source, CountedPairs):
            for item, count in source.pairs:
                ret.add(item, count)
        elif isinstance(source, RawItems):
            for item in source.items:
                ret.add(item)
        elif isinstance(source, TextLines):
            for line in source.lines():
                ret.add(line)
        else:
            raise InvalidArgumentError(
                f"Unknown source variant: {type(source).__name__}"
            )
        return ret

    @classmethod
    def parse(cls, source) -> "Multiset":
        """
        Build from a multiset, mapping or iterable.

        Multisets and mappings are read as counts, other iterables as items.

        Raises:
            InvalidArgumentError: If source is a str or is not iterable
        """
        return cls.from_source(classify_source(source))

    @classmethod
    def parse_force(cls, source) -> "Multiset":
        """Like parse(), but a str is read line by line."""
        return cls.from_source(classify_source(source, text=True))

    def copy(self) -> "Multiset":
        """Copy with independent storage."""
        ret = type(self)()
        ret._store = self._store.copy()
        return ret

    __copy__ = copy

    def replace(self, other) -> "Multiset":
        """Replace the contents with those of other (Multiset or Mapping)."""
        pairs = self._coerce(other)._store.pairs()
        self._store.clear()
        for item, count in pairs:
            self.renew_count(item, count)
        return self

    def to_count_map(self) -> dict[Hashable, int]:
        """Plain dict of item -> count; to_multiset() is its inverse."""
        return self._store.to_dict()

    def to_list(self) -> list:
        """Every occurrence, grouped by item in insertion order."""
        return _expand(self._store.iter_pairs())

    def to_set(self) -> set:
        return set(self._store.iter_items())

    # =========================================================================
    # Counts
    # =========================================================================

    def count(self, *item, predicate: Callable[[Hashable], bool] | None = None) -> int:
        """
        Count occurrences.

        count() is the total size, count(item) the count of one item and
        count(predicate=fn) the summed count of distinct items for which fn
        is truthy. The predicate is keyword-only; a callable passed
        positionally is rejected unless it is itself a stored item.

        Raises:
            InvalidArgumentError: If both an item and a predicate are given,
                more than one item is given, or the item is an absent callable
        """
        if predicate is not None:
            if item:
                raise InvalidArgumentError("Both item and predicate cannot be given")
            return sum(c for i, c in self._store.iter_pairs() if predicate(i))
        if not item:
            return self._store.total()
        if len(item) > 1:
            raise InvalidArgumentError("Only one item can be given")
        if callable(item[0]) and item[0] not in self._store:
            raise InvalidArgumentError("Pass a predicate as count(predicate=fn)")
        return self._store.count(item[0])

    def renew_count(self, item: Hashable, number) -> "Multiset | None":
        """
        Set the count of item; zero or less removes it.

        Returns:
            self, or None if number is None

        Raises:
            InvalidArgumentError: If number is not integer-like
        """
        if self._store.renew(item, number) is None:
            return None
        return self

    def add(self, item: Hashable, count=1) -> "Multiset | None":
        """
        Add count occurrences of item.

        Returns:
            self, or None (nothing added) if count is None or not positive
        """
        n = resolve_count(count)
        if n is None or n <= 0:
            return None
        return self.renew_count(item, self._store.count(item) + n)

    def delete(self, item: Hashable, count=1) -> "Multiset | None":
        """
        Remove up to count occurrences of item.

        Removing more occurrences than stored removes the item entirely.

        Returns:
            self, or None if item is absent or count is None or not positive

        Raises:
            InvalidArgumentError: If count is not integer-like, even when item
                is absent
        """
        n = resolve_count(count)
        if n is None or n <= 0 or item not in self._store:
            return None
        return self.renew_count(item, self._store.count(item) - n)

    def delete_all(self, item: Hashable) -> "Multiset":
        """Remove every occurrence of item."""
        self._store.discard(item)
        return self

    def clear(self) -> "Multiset":
        self._store.clear()
        return self

    def size(self) -> int:
        return self._store.total()

    def __len__(self) -> int:
        return self._store.total()

    def is_empty(self) -> bool:
        return len(self._store) == 0

    def items(self) -> list[Hashable]:
        """Distinct items in insertion order."""
        return self._store.items()

    def includes(self, item: Hashable) -> bool:
        return item in self._store

    member = includes

    def __contains__(self, item: Hashable) -> bool:
        return item in self._store

    # =========================================================================
    # Comparison
    # =========================================================================

    def _require_multiset(self, other, name: str) -> None:
        if not isinstance(other, Multiset):
            raise TypeMismatchError(
                f"{name}: argument must be a Multiset, got {type(other).__name__}"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Multiset):
            return False
        return compare_set_with(self, other, EQUAL)

    def __hash__(self) -> int:
        return hash(frozenset(self._store.iter_pairs()))

    def issuperset(self, other: "Multiset") -> bool:
        """Every item occurs in self at least as often as in other."""
        self._require_multiset(other, "issuperset")
        return compare_set_with(self, other, SUPERSET)

    def issubset(self, other: "Multiset") -> bool:
        """Every item occurs in self at most as often as in other."""
        self._require_multiset(other, "issubset")
        return compare_set_with(self, other, SUBSET)

    def is_proper_superset(self, other: "Multiset") -> bool:
        self._require_multiset(other, "is_proper_superset")
        return is_proper(self, other, SUPERSET)

    def is_proper_subset(self, other: "Multiset") -> bool:
        self._require_multiset(other, "is_proper_subset")
        return is_proper(self, other, SUBSET)

    __ge__ = issuperset
    __le__ = issubset
    __gt__ = is_proper_superset
    __lt__ = is_proper_subset

    # =========================================================================
    # Set algebra
    # =========================================================================

    def _coerce(self, other) -> "Multiset":
        if isinstance(other, Multiset):
            return other
        if isinstance(other, Mapping):
            return to_multiset(other)
        raise TypeMismatchError(
            f"Operand must be a Multiset or a mapping, got {type(other).__name__}"
        )

    def intersection(self, other) -> "Multiset":
        """Items present in both; count is the smaller of the two."""
        other = self._coerce(other)
        ret = type(self)()
        for item, count in self._store.iter_pairs():
            if item in other:
                ret.renew_count(item, min(count, other.count(item)))
        return ret

    def union(self, other) -> "Multiset":
        """Items present in either; count is the larger of the two."""
        other = self._coerce(other)
        ret = self.copy()
        for item, count in other.each_pair():
            ret.renew_count(item, max(self.count(item), count))
        return ret

    def merge(self, other) -> "Multiset":
        """Sum of counts, as a new multiset."""
        return self.copy().merge_update(other)

    def merge_update(self, other) -> "Multiset":
        """Add every occurrence of other to self."""
        for item, count in self._coerce(other)._store.pairs():
            self.add(item, count)
        return self

    def subtract(self, other) -> "Multiset":
        """Counts of other removed from self, clamped at zero."""
        return self.copy().subtract_update(other)

    def subtract_update(self, other) -> "Multiset":
        for item, count in self._coerce(other)._store.pairs():
            self.delete(item, count)
        return self

    def __and__(self, other):
        if not isinstance(other, Multiset):
            return NotImplemented
        return self.intersection(other)

    def __or__(self, other):
        if not isinstance(other, Multiset):
            return NotImplemented
        return self.union(other)

    def __add__(self, other):
        if not isinstance(other, Multiset):
            return NotImplemented
        return self.merge(other)

    def __sub__(self, other):
        if not isinstance(other, Multiset):
            return NotImplemented
        return self.subtract(other)

    # =========================================================================
    # Iteration
    # =========================================================================

    def __iter__(self) -> Iterator:
        for item, count in self._store.iter_pairs():
            yield from repeat(item, count)

    def each(self, fn: Callable[[Hashable], object] | None = None):
        """
        Call fn once per occurrence.

        Returns:
            self, or a LazySequence of occurrences if fn is None
        """
        if fn is None:
            return LazySequence(self.__iter__, "each")
        for item, count in self._store.pairs():
            for _ in range(count):
                fn(item)
        return self

    def each_item(self, fn: Callable[[Hashable], object] | None = None):
        """Call fn once per distinct item."""
        if fn is None:
            return LazySequence(self._store.iter_items, "each_item")
        for item in self._store.items():
            fn(item)
        return self

    def each_pair(self, fn: Callable[[Hashable, int], object] | None = None):
        """Call fn(item, count) once per distinct item."""
        if fn is None:
            return LazySequence(self._store.iter_pairs, "each_pair")
        for item, count in self._store.pairs():
            fn(item, count)
        return self

    each_with_count = each_pair

    # =========================================================================
    # Transforms and filters
    # =========================================================================

    def map(self, fn: Callable[[Hashable], Hashable] | None = None):
        """
        New multiset of fn(item), each carrying the count of item.

        Items mapped to the same value merge their counts.
        """
        if fn is None:
            return LazySequence(self._store.iter_items, "map")
        ret = type(self)()
        for item, count in self._store.pairs():
            ret.add(fn(item), count)
        return ret

    collect = map

    def map_update(self, fn: Callable[[Hashable], Hashable]) -> "Multiset":
        return self.replace(self.map(fn))

    collect_update = map_update

    def map_with(self, fn: Callable[[Hashable, int], tuple] | None = None):
        """New multiset of the (item, count) pairs returned by fn(item, count)."""
        if fn is None:
            return LazySequence(self._store.iter_pairs, "map_with")
        ret = type(self)()
        for item, count in self._store.pairs():
            new_item, new_count = fn(item, count)
            ret.add(new_item, new_count)
        return ret

    collect_with = map_with

    def map_with_update(self, fn: Callable[[Hashable, int], tuple]) -> "Multiset":
        for item, count in self._store.pairs():
            self.delete(item, count)
            new_item, new_count = fn(item, count)
            self.add(new_item, new_count)
        return self

    collect_with_update = map_with_update

    def select(self, fn: Callable[[Hashable], bool] | None = None):
        """New multiset of the items for which fn(item) is truthy."""
        if fn is None:
            return LazySequence(self._store.iter_items, "select")
        ret = type(self)()
        for item, count in self._store.pairs():
            if fn(item):
                ret.renew_count(item, count)
        return ret

    find_all = select

    def select_with(self, fn: Callable[[Hashable, int], bool] | None = None):
        if fn is None:
            return LazySequence(self._store.iter_pairs, "select_with")
        ret = type(self)()
        for item, count in self._store.pairs():
            if fn(item, count):
                ret.renew_count(item, count)
        return ret

    find_all_with = select_with

    def reject(self, fn: Callable[[Hashable], bool] | None = None):
        """New multiset without the items for which fn(item) is truthy."""
        if fn is None:
            return LazySequence(self._store.iter_items, "reject")
        return self.select(lambda item: not fn(item))

    def reject_with(self, fn: Callable[[Hashable, int], bool] | None = None):
        if fn is None:
            return LazySequence(self._store.iter_pairs, "reject_with")
        return self.select_with(lambda item, count: not fn(item, count))

    def reject_update(self, fn: Callable[[Hashable], bool]) -> "Multiset | None":
        """
        Remove the items for which fn(item) is truthy.

        Returns:
            self, or None if nothing was removed
        """
        changed = False
        for item in self._store.items():
            if fn(item):
                self.delete_all(item)
                changed = True
        return self if changed else None

    def delete_if(self, fn: Callable[[Hashable], bool]) -> "Multiset":
        """Like reject_update(), but always returns self."""
        self.reject_update(fn)
        return self

    def delete_with(self, fn: Callable[[Hashable, int], bool]) -> "Multiset":
        """Remove the items for which fn(item, count) is truthy; returns self."""
        for item, count in self._store.pairs():
            if fn(item, count):
                self.delete_all(item)
        return self

    def grep(self, pattern, fn: Callable[[Hashable], Hashable] | None = None) -> "Multiset":
        """
        New multiset of the items matching pattern, optionally mapped by fn.

        Args:
            pattern: Compiled regex (searched in str items), class (isinstance),
                range or set (membership), callable (truthy result) or any
                other value (equality)
            fn: Applied to each matching item; counts carry over
        """
        ret = type(self)()
        for item, count in self._store.pairs():
            if _matches(pattern, item):
                ret.add(item if fn is None else fn(item), count)
        return ret

    def inject_with(self, init, fn: Callable[[object, Hashable, int], object]):
        """Fold fn(acc, item, count) over the distinct items."""
        for item, count in self._store.pairs():
            init = fn(init, item, count)
        return init

    reduce_with = inject_with

    # =========================================================================
    # Classification
    # =========================================================================

    def classify(self, fn: Callable[[Hashable], Hashable] | None = None):
        """
        Partition into a Multimap keyed by fn(item).

        Each item keeps its count; items sharing a key merge into one bucket.
        """
        if fn is None:
            return LazySequence(self._store.iter_items, "classify")
        from .multimap import Multimap

        ret = Multimap()
        for item, count in self._store.pairs():
            ret.fetch(fn(item)).add(item, count)
        return ret

    group_by = classify

    def classify_with(self, fn: Callable[[Hashable, int], Hashable] | None = None):
        """Partition into a Multimap keyed by fn(item, count)."""
        if fn is None:
            return LazySequence(self._store.iter_pairs, "classify_with")
        from .multimap import Multimap

        ret = Multimap()
        for item, count in self._store.pairs():
            ret.fetch(fn(item, count)).add(item, count)
        return ret

    group_by_with = classify_with

    # =========================================================================
    # Search
    # =========================================================================

    def find(self, fn: Callable[[Hashable], bool] | None = None, ifnone=None):
        """
        First distinct item for which fn(item) is truthy.

        Returns:
            The item, else ifnone() if given, else None
        """
        if fn is None:
            return LazySequence(self._store.iter_items, "find")
        for item in self._store.items():
            if fn(item):
                return item
        return None if ifnone is None else ifnone()

    detect = find

    def find_with(self, fn: Callable[[Hashable, int], bool] | None = None, ifnone=None):
        if fn is None:
            return LazySequence(self._store.iter_pairs, "find_with")
        for item, count in self._store.pairs():
            if fn(item, count):
                return item
        return None if ifnone is None else ifnone()

    detect_with = find_with

    # Ties resolve to the earliest inserted item: max()/min() return the
    # first extreme they meet and sorted() is stable.

    def max(self, compare: Callable[[Hashable, Hashable], int] | None = None):
        """Largest distinct item, by natural order or a cmp-style compare."""
        items = self._store.items()
        if not items:
            return None
        return max(items, key=cmp_to_key(compare)) if compare else max(items)

    def min(self, compare: Callable[[Hashable, Hashable], int] | None = None):
        items = self._store.items()
        if not items:
            return None
        return min(items, key=cmp_to_key(compare)) if compare else min(items)

    def minmax(self, compare: Callable[[Hashable, Hashable], int] | None = None) -> tuple:
        return (self.min(compare), self.max(compare))

    def max_by(self, key: Callable[[Hashable], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_items, "max_by")
        items = self._store.items()
        return max(items, key=key) if items else None

    def min_by(self, key: Callable[[Hashable], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_items, "min_by")
        items = self._store.items()
        return min(items, key=key) if items else None

    def minmax_by(self, key: Callable[[Hashable], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_items, "minmax_by")
        return (self.min_by(key), self.max_by(key))

    @staticmethod
    def _pair_key(compare: Callable[[Hashable, int, Hashable, int], int]):
        return cmp_to_key(lambda a, b: compare(a[0], a[1], b[0], b[1]))

    def max_with(self, compare: Callable[[Hashable, int, Hashable, int], int] | None = None):
        """Item of the largest (item, count) pair under compare(i1, c1, i2, c2)."""
        if compare is None:
            return LazySequence(self._store.iter_pairs, "max_with")
        pairs = self._store.pairs()
        return max(pairs, key=self._pair_key(compare))[0] if pairs else None

    def min_with(self, compare: Callable[[Hashable, int, Hashable, int], int] | None = None):
        if compare is None:
            return LazySequence(self._store.iter_pairs, "min_with")
        pairs = self._store.pairs()
        return min(pairs, key=self._pair_key(compare))[0] if pairs else None

    def minmax_with(self, compare: Callable[[Hashable, int, Hashable, int], int] | None = None):
        if compare is None:
            return LazySequence(self._store.iter_pairs, "minmax_with")
        if self.is_empty():
            return None
        return (self.min_with(compare), self.max_with(compare))

    def max_by_with(self, key: Callable[[Hashable, int], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_pairs, "max_by_with")
        pairs = self._store.pairs()
        return max(pairs, key=lambda p: key(*p))[0] if pairs else None

    def min_by_with(self, key: Callable[[Hashable, int], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_pairs, "min_by_with")
        pairs = self._store.pairs()
        return min(pairs, key=lambda p: key(*p))[0] if pairs else None

    def minmax_by_with(self, key: Callable[[Hashable, int], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_pairs, "minmax_by_with")
        if self.is_empty():
            return None
        return (self.min_by_with(key), self.max_by_with(key))

    # =========================================================================
    # Sorting
    # =========================================================================

    def sort(self, compare: Callable[[Hashable, Hashable], int] | None = None) -> list:
        """Every occurrence, distinct items sorted and repeated by count."""
        key = cmp_to_key(compare) if compare else None
        items = sorted(self._store.items(), key=key)
        return _expand((item, self._store.count(item)) for item in items)

    def sort_by(self, key: Callable[[Hashable], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_items, "sort_by")
        items = sorted(self._store.items(), key=key)
        return _expand((item, self._store.count(item)) for item in items)

    def sort_with(self, compare: Callable[[Hashable, int, Hashable, int], int] | None = None):
        if compare is None:
            return LazySequence(self._store.iter_pairs, "sort_with")
        return _expand(sorted(self._store.pairs(), key=self._pair_key(compare)))

    def sort_by_with(self, key: Callable[[Hashable, int], object] | None = None):
        if key is None:
            return LazySequence(self._store.iter_pairs, "sort_by_with")
        return _expand(sorted(self._store.pairs(), key=lambda p: key(*p)))

    # =========================================================================
    # Flattening
    # =========================================================================

    def _flatten(self, path: set[int] | None) -> "Multiset":
        """
        Recursively flattened copy.

        path holds the ids of the multisets currently being flattened; None
        disables cycle detection.
        """
        if path is not None:
            if id(self) in path:
                logger.debug("Multiset %#x reached again while flattening", id(self))
                raise CyclicNestingError("Multiset contains itself; cannot flatten")
            path.add(id(self))
        try:
            ret = type(self)()
            for item, count in self._store.pairs():
                if isinstance(item, Multiset):
                    for inner, inner_count in item._flatten(path).each_pair():
                        ret.add(inner, inner_count * count)
                else:
                    ret.add(item, count)
        finally:
            if path is not None:
                path.discard(id(self))
        return ret

    def flatten(self, detect_cycles: bool = True) -> "Multiset":
        """
        New multiset with every nested multiset replaced by its contents.

        A nested multiset stored k times contributes its flattened contents
        k times.

        Args:
            detect_cycles: Raise CyclicNestingError on self-containing
                nesting instead of recursing until RecursionError

        Raises:
            CyclicNestingError: If a multiset contains itself
        """
        return self._flatten(set() if detect_cycles else None)

    def flatten_update(self, detect_cycles: bool = True) -> "Multiset | None":
        """
        Flatten in place.

        Returns:
            self, or None if nothing was nested

        Raises:
            CyclicNestingError: If a multiset contains itself; self is left
                unchanged
        """
        path = {id(self)} if detect_cycles else None
        nested = [
            (item, count, item._flatten(path))
            for item, count in self._store.pairs()
            if isinstance(item, Multiset)
        ]
        if not nested:
            return None
        for item, count, flat in nested:
            self.delete_all(item)
            for inner, inner_count in flat.each_pair():
                self.add(inner, inner_count * count)
        return self

    def __repr__(self) -> str:
        return f"Multiset({self._store.to_dict()!r})"


def to_multiset(mapping: Mapping) -> Multiset:
    """
    Multiset whose counts are the values of mapping.

    Items with a count of zero or less are left out.

    Raises:
        InvalidArgumentError: If mapping is not a Mapping or a count is not
            integer-like
    """
    if not isinstance(mapping, Mapping):
        raise InvalidArgumentError(
            f"Expected a mapping of item -> count, got {type(mapping).__name__}"
        )
    ret = Multiset()
    for item, count in mapping.items():
        ret.renew_count(item, count)
    return ret
