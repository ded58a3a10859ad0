"""
Multimap: association from keys to Multiset buckets.

Reading an absent key creates and installs an empty bucket (see bucket()).
Empty buckets are purged before any operation that observes keys, so a key
only becomes visible once its bucket holds something.

Like Multiset, a Multimap does no internal locking.
"""

import logging
from collections.abc import Callable, Hashable, Iterator, Mapping

from .errors import InvalidArgumentError, TypeMismatchError
from .multiset import Multiset
from .sequence import LazySequence

logger = logging.getLogger(__name__)


class Multimap:
    """Each key maps to a Multiset of values."""

    def __init__(self):
        self._buckets: dict[Hashable, Multiset] = {}

    def _cleanup(self) -> None:
        """Purge keys whose bucket is empty."""
        empty = [key for key, bucket in self._buckets.items() if bucket.is_empty()]
        for key in empty:
            del self._buckets[key]
        if empty:
            logger.debug("Purged %d empty bucket(s)", len(empty))

    def bucket(self, key: Hashable) -> Multiset:
        """
        Get the bucket for key, installing an empty one if key is absent.

        The installed bucket stays invisible to key queries until something
        is added to it.
        """
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = Multiset()
        return bucket

    fetch = bucket

    def __getitem__(self, key: Hashable) -> Multiset:
        return self.bucket(key)

    def store(self, key: Hashable, source):
        """
        Replace the bucket for key.

        Args:
            key: Bucket key
            source: Multiset (copied), Mapping of value -> count, or iterable
                of values

        Returns:
            source

        Raises:
            InvalidArgumentError: If source is a str or is not iterable
        """
        self._buckets[key] = Multiset.parse(source)
        return source

    def __setitem__(self, key: Hashable, source) -> None:
        self.store(key, source)

    def delete(self, key: Hashable) -> Multiset:
        """Remove key and return its bucket (an empty Multiset if absent)."""
        bucket = self._buckets.pop(key, None)
        return Multiset() if bucket is None else bucket

    def clear(self) -> "Multimap":
        self._buckets.clear()
        return self

    def copy(self) -> "Multimap":
        """Copy with independent buckets."""
        ret = Multimap()
        for key, bucket in self.each_pair_list():
            ret._buckets[key] = bucket.copy()
        return ret

    __copy__ = copy

    def replace(self, other: "Multimap") -> "Multimap":
        triples = list(self._require_multimap(other).each_pair_with())
        self._buckets.clear()
        for key, value, count in triples:
            self.bucket(key).add(value, count)
        return self

    def to_dict(self) -> dict[Hashable, Multiset]:
        """Plain dict of key -> bucket (the buckets are not copied)."""
        self._cleanup()
        return dict(self._buckets)

    @staticmethod
    def _require_multimap(other) -> "Multimap":
        if not isinstance(other, Multimap):
            raise TypeMismatchError(
                f"Argument must be a Multimap, got {type(other).__name__}"
            )
        return other

    def __eq__(self, other) -> bool:
        if not isinstance(other, Multimap):
            return False
        self._cleanup()
        other._cleanup()
        return self._buckets == other._buckets

    __hash__ = None

    # =========================================================================
    # Observation
    # =========================================================================

    def keys(self) -> list[Hashable]:
        self._cleanup()
        return list(self._buckets)

    def has_key(self, key: Hashable) -> bool:
        self._cleanup()
        return key in self._buckets

    def __contains__(self, key: Hashable) -> bool:
        return self.has_key(key)

    def is_empty(self) -> bool:
        self._cleanup()
        return not self._buckets

    def size(self) -> int:
        """Total number of value occurrences across all buckets."""
        self._cleanup()
        return sum(bucket.size() for bucket in self._buckets.values())

    def __len__(self) -> int:
        return self.size()

    def values(self) -> Multiset:
        """Every bucket merged into one Multiset."""
        ret = Multiset()
        for _, bucket in self.each_pair_list():
            ret.merge_update(bucket)
        return ret

    def has_value(self, value: Hashable) -> bool:
        return any(value in bucket for _, bucket in self.each_pair_list())

    def key(self, value: Hashable):
        """First key whose bucket holds value, or None."""
        for key, bucket in self.each_pair_list():
            if value in bucket:
                return key
        return None

    def values_at(self, *keys: Hashable) -> list[Multiset]:
        return [self.bucket(key) for key in keys]

    # =========================================================================
    # Iteration
    # =========================================================================

    def _iter_pairs(self) -> Iterator[tuple[Hashable, Hashable]]:
        self._cleanup()
        for key, bucket in list(self._buckets.items()):
            for value in bucket:
                yield key, value

    def _iter_pairs_with(self) -> Iterator[tuple[Hashable, Hashable, int]]:
        self._cleanup()
        for key, bucket in list(self._buckets.items()):
            for value, count in bucket.each_pair():
                yield key, value, count

    def _iter_buckets(self) -> Iterator[tuple[Hashable, Multiset]]:
        self._cleanup()
        yield from list(self._buckets.items())

    def each_pair(self, fn: Callable[[Hashable, Hashable], object] | None = None):
        """Call fn(key, value) once per value occurrence."""
        if fn is None:
            return LazySequence(self._iter_pairs, "each_pair")
        for key, value in list(self._iter_pairs()):
            fn(key, value)
        return self

    each = each_pair

    def __iter__(self) -> Iterator[tuple[Hashable, Hashable]]:
        return self._iter_pairs()

    def each_pair_with(self, fn: Callable[[Hashable, Hashable, int], object] | None = None):
        """Call fn(key, value, count) once per distinct value of each bucket."""
        if fn is None:
            return LazySequence(self._iter_pairs_with, "each_pair_with")
        for key, value, count in list(self._iter_pairs_with()):
            fn(key, value, count)
        return self

    def each_pair_list(self, fn: Callable[[Hashable, Multiset], object] | None = None):
        """Call fn(key, bucket) once per non-empty bucket."""
        if fn is None:
            return LazySequence(self._iter_buckets, "each_pair_list")
        for key, bucket in list(self._iter_buckets()):
            fn(key, bucket)
        return self

    def each_key(self, fn: Callable[[Hashable], object] | None = None):
        if fn is None:
            return LazySequence(lambda: iter(self.keys()), "each_key")
        for key in self.keys():
            fn(key)
        return self

    def each_value(self, fn: Callable[[Hashable], object] | None = None):
        """Call fn(value) once per value occurrence."""
        if fn is None:
            return LazySequence(lambda: (v for _, v in self._iter_pairs()), "each_value")
        for _, value in list(self._iter_pairs()):
            fn(value)
        return self

    # =========================================================================
    # Filters
    # =========================================================================

    def delete_if(self, fn: Callable[[Hashable, Hashable], bool]) -> "Multimap":
        """Remove every value for which fn(key, value) is truthy; returns self."""
        for key, bucket in self._iter_buckets():
            bucket.delete_if(lambda value, key=key: fn(key, value))
        return self

    def reject(self, fn: Callable[[Hashable, Hashable], bool]) -> "Multimap":
        return self.copy().delete_if(fn)

    def reject_update(self, fn: Callable[[Hashable, Hashable], bool]) -> "Multimap | None":
        """
        Remove every value for which fn(key, value) is truthy.

        Returns:
            self, or None if nothing was removed
        """
        changed = False
        for key, bucket in self._iter_buckets():
            if bucket.reject_update(lambda value, key=key: fn(key, value)) is not None:
                changed = True
        return self if changed else None

    def delete_with(self, fn: Callable[[Hashable, Hashable, int], bool]) -> "Multimap":
        """Remove every value for which fn(key, value, count) is truthy."""
        for key, bucket in self._iter_buckets():
            bucket.delete_with(lambda value, count, key=key: fn(key, value, count))
        return self

    def reject_with(self, fn: Callable[[Hashable, Hashable, int], bool]) -> "Multimap":
        return self.copy().delete_with(fn)

    # =========================================================================
    # Combination
    # =========================================================================

    def invert(self) -> "Multimap":
        """Multimap where each (key, value, count) becomes count times key under value."""
        ret = Multimap()
        for key, value, count in self._iter_pairs_with():
            ret.bucket(value).add(key, count)
        return ret

    def merge_update(self, other: "Multimap") -> "Multimap":
        """Add every (key, value, count) of other into self."""
        for key, value, count in list(self._require_multimap(other)._iter_pairs_with()):
            self.bucket(key).add(value, count)
        return self

    def merge(self, other: "Multimap") -> "Multimap":
        return self.copy().merge_update(other)

    def __add__(self, other):
        if not isinstance(other, Multimap):
            return NotImplemented
        return self.merge(other)

    def __repr__(self) -> str:
        self._cleanup()
        return f"Multimap({self._buckets!r})"


def to_multimap(mapping: Mapping) -> Multimap:
    """
    Multimap whose buckets are built from the values of mapping.

    Each value is coerced the way Multimap.store() coerces it.

    Raises:
        InvalidArgumentError: If mapping is not a Mapping or a value cannot
            be coerced
    """
    if not isinstance(mapping, Mapping):
        raise InvalidArgumentError(
            f"Expected a mapping of key -> values, got {type(mapping).__name__}"
        )
    ret = Multimap()
    for key, values in mapping.items():
        ret.store(key, values)
    return ret


def multimap_of(mapping: Mapping) -> Multimap:
    """Multimap where each value of mapping is the single item of its key's bucket."""
    if not isinstance(mapping, Mapping):
        raise InvalidArgumentError(
            f"Expected a mapping of key -> value, got {type(mapping).__name__}"
        )
    ret = Multimap()
    for key, value in mapping.items():
        ret.bucket(key).add(value)
    return ret
