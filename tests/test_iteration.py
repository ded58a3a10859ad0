"""Tests for Multiset traversal, transforms, filters, search and sorting."""

import re

import pytest

from counted import LazySequence, Multimap, Multiset


@pytest.fixture
def ms():
    return Multiset("a a b b b b c d d d".split())


class TestTraversal:
    """Expanding versus distinct-once traversal."""

    def test_iter_expands(self):
        ms = Multiset(["b", "a", "b"])
        assert list(ms) == ["b", "b", "a"]

    def test_each_expands(self, ms):
        seen = []
        assert ms.each(seen.append) is ms
        assert len(seen) == 10
        assert seen.count("b") == 4

    def test_each_streams_occurrences(self):
        ms = Multiset.from_counts({"a": 10**9, "b": 1})
        seen = []

        def take_three(item):
            seen.append(item)
            if len(seen) == 3:
                raise RuntimeError("enough")

        with pytest.raises(RuntimeError, match="enough"):
            ms.each(take_three)
        assert seen == ["a", "a", "a"]

    def test_each_item_once(self, ms):
        seen = []
        assert ms.each_item(seen.append) is ms
        assert seen == ["a", "b", "c", "d"]

    def test_each_pair(self, ms):
        seen = []
        assert ms.each_pair(lambda item, count: seen.append((item, count))) is ms
        assert seen == [("a", 2), ("b", 4), ("c", 1), ("d", 3)]
        assert ms.each_with_count == ms.each_pair

    def test_high_multiplicity_one_callback(self):
        """A transform calls back once per distinct item, not per occurrence."""
        ms = Multiset.from_counts({"x": 10000})
        calls = []

        def double(item):
            calls.append(item)
            return item * 2

        assert ms.map(double) == Multiset.from_counts({"xx": 10000})
        assert calls == ["x"]

    def test_lazy_sequences_restart(self, ms):
        seq = ms.each_item()
        assert isinstance(seq, LazySequence)
        assert list(seq) == ["a", "b", "c", "d"]
        assert list(seq) == ["a", "b", "c", "d"]

    def test_lazy_sequences_follow_contents(self):
        ms = Multiset.of("a")
        seq = ms.each()
        ms.add("b", 2)
        assert seq.to_list() == ["a", "b", "b"]

    def test_lazy_forms(self, ms):
        assert list(ms.each_pair()) == [("a", 2), ("b", 4), ("c", 1), ("d", 3)]
        for method in (ms.map, ms.select, ms.reject, ms.find, ms.classify, ms.sort_by, ms.max_by):
            assert list(method()) == ["a", "b", "c", "d"]
        for method in (
            ms.map_with, ms.select_with, ms.find_with, ms.classify_with, ms.sort_by_with,
            ms.max_with, ms.min_with, ms.minmax_with, ms.sort_with,
        ):
            assert list(method()) == [("a", 2), ("b", 4), ("c", 1), ("d", 3)]

    def test_callback_may_mutate(self):
        ms = Multiset.of("a", "b")
        ms.each_item(lambda item: ms.add(item + "!"))
        assert ms.items() == ["a", "b", "a!", "b!"]


class TestTransforms:
    """Tests for map, select, reject and grep."""

    def test_map_merges_collisions(self):
        ms = Multiset.from_counts({"a": 2, "A": 3, "b": 1})
        assert ms.map(str.lower).to_count_map() == {"a": 5, "b": 1}
        assert ms.collect == ms.map

    def test_map_update(self):
        ms = Multiset.from_counts({1: 2, 2: 1})
        assert ms.map_update(lambda x: x * 10) is ms
        assert ms.to_count_map() == {10: 2, 20: 1}

    def test_map_with(self, ms):
        result = ms.map_with(lambda item, count: (item.upper(), count * 2))
        assert result.to_count_map() == {"A": 4, "B": 8, "C": 2, "D": 6}

    def test_map_with_drops_non_positive(self, ms):
        result = ms.map_with(lambda item, count: (item, count - 2))
        assert result.to_count_map() == {"b": 2, "d": 1}

    def test_map_with_update(self, ms):
        assert ms.map_with_update(lambda item, count: (item, 1)) is ms
        assert ms.to_count_map() == {"a": 1, "b": 1, "c": 1, "d": 1}

    def test_map_with_update_onto_existing_item(self):
        ms = Multiset.from_counts({"a": 1, "b": 2})
        ms.map_with_update(lambda item, count: ("b", count))
        assert ms.to_count_map() == {"b": 3}

    def test_select(self, ms):
        assert ms.select(lambda item: item == "d") == Multiset("d d d".split())
        assert ms.find_all == ms.select

    def test_select_with(self, ms):
        assert ms.select_with(lambda item, count: count <= 2) == Multiset("a a c".split())

    def test_reject(self, ms):
        assert ms.reject(lambda item: item == "d") == Multiset("a a b b b b c".split())

    def test_reject_with(self, ms):
        result = ms.reject_with(lambda item, count: item == "d" or count > 3)
        assert result == Multiset("a a c".split())

    def test_reject_update_returns_none_when_unchanged(self, ms):
        assert ms.reject_update(lambda item: item == "x") is None
        assert ms.reject_update(lambda item: item == "d") is ms
        assert ms == Multiset("a a b b b b c".split())

    def test_delete_if_always_returns_self(self, ms):
        assert ms.delete_if(lambda item: item == "x") is ms
        assert ms.delete_if(lambda item: item == "d") is ms
        assert ms == Multiset("a a b b b b c".split())

    def test_delete_with(self, ms):
        assert ms.delete_with(lambda item, count: count == 100) is ms
        assert ms.delete_with(lambda item, count: count > 2) is ms
        assert ms == Multiset("a a c".split())

    def test_grep_regex(self, ms):
        assert ms.grep(re.compile("d")) == Multiset("d d d".split())
        assert ms.grep(re.compile("d"), lambda item: item + "x") == Multiset("dx dx dx".split())

    def test_grep_other_patterns(self):
        ms = Multiset([1, 1, "one", 2.5, 7])
        assert ms.grep(int) == Multiset([1, 1, 7])
        assert ms.grep(range(0, 5)) == Multiset([1, 1])
        assert ms.grep(lambda x: x == "one") == Multiset(["one"])
        assert ms.grep(7) == Multiset([7])

    def test_inject_with(self, ms):
        result = ms.inject_with(("", 0), lambda acc, item, count: (acc[0] + item, acc[1] + count))
        assert result == ("abcd", 10)
        assert ms.reduce_with == ms.inject_with


class TestSearch:
    """Tests for find and the min/max family."""

    def test_find(self, ms):
        assert ms.find(lambda item: item == "d") == "d"
        assert ms.find(lambda item: item == "x") is None
        assert ms.find(lambda item: item == "x", ifnone=lambda: "none") == "none"

    def test_find_with(self, ms):
        assert ms.find_with(lambda item, count: count == 2) == "a"
        assert ms.detect_with(lambda item, count: count == 9) is None

    def test_max_min(self, ms):
        assert ms.max() == "d"
        assert ms.min() == "a"
        assert ms.minmax() == ("a", "d")

    def test_max_with_comparator(self, ms):
        reverse = lambda a, b: (a < b) - (a > b)
        assert ms.max(reverse) == "a"
        assert ms.min(reverse) == "d"

    def test_by_key(self):
        ms = Multiset(["bb", "a", "ccc", "a"])
        assert ms.max_by(len) == "ccc"
        assert ms.min_by(len) == "a"
        assert ms.minmax_by(len) == ("a", "ccc")

    def test_ties_resolve_to_insertion_order(self):
        ms = Multiset(["xy", "ab", "zz", "q"])
        assert ms.max_by(len) == "xy"
        assert ms.min_by(lambda item: len(item) // 2) == "q"
        assert ms.max_by_with(lambda item, count: count) == "xy"

    def test_with_variants(self, ms):
        by_count = lambda i1, c1, i2, c2: c1 - c2
        assert ms.max_with(by_count) == "b"
        assert ms.min_with(by_count) == "c"
        assert ms.minmax_with(by_count) == ("c", "b")
        assert ms.max_by_with(lambda item, count: count) == "b"
        assert ms.min_by_with(lambda item, count: count) == "c"
        assert ms.minmax_by_with(lambda item, count: count) == ("c", "b")

    def test_empty(self):
        empty = Multiset()
        assert empty.max() is None
        assert empty.min_by(len) is None
        assert empty.minmax() == (None, None)
        assert empty.minmax_by(len) == (None, None)
        assert empty.max_with(lambda *a: 0) is None
        assert empty.minmax_with(lambda *a: 0) is None
        assert empty.minmax_by_with(lambda i, c: c) is None


class TestSorting:
    """Tests for sort and its variants."""

    def test_sort(self):
        ms = Multiset(["c", "a", "b", "a"])
        assert ms.sort() == ["a", "a", "b", "c", ]
        assert ms.sort(lambda a, b: (a < b) - (a > b)) == ["c", "b", "a", "a"]

    def test_sort_by_is_stable(self):
        ms = Multiset(["bb", "a", "aa", "b", "bb"])
        assert ms.sort_by(len) == ["a", "b", "bb", "bb", "aa"]

    def test_sort_with(self, ms):
        by_count = lambda i1, c1, i2, c2: c1 - c2
        assert ms.sort_with(by_count) == ["c", "a", "a", "d", "d", "d", "b", "b", "b", "b"]

    def test_sort_by_with(self, ms):
        result = ms.sort_by_with(lambda item, count: -count)
        assert result == ["b", "b", "b", "b", "d", "d", "d", "a", "a", "c"]


class TestClassify:
    """Tests for classify and classify_with."""

    def test_classify_identity(self):
        result = Multiset("a a b b b c".split()).classify(lambda item: item)
        assert isinstance(result, Multimap)
        assert result.keys() == ["a", "b", "c"]
        assert result["a"] == Multiset.from_counts({"a": 2})
        assert result["b"] == Multiset.from_counts({"b": 3})
        assert result["c"] == Multiset.from_counts({"c": 1})

    def test_classify_merges_colliding_keys(self):
        ms = Multiset([1, 2, 2, 3, 4, 4, 4])
        result = ms.group_by(lambda n: n % 2)
        assert result[0].to_count_map() == {2: 2, 4: 3}
        assert result[1].to_count_map() == {1: 1, 3: 1}
        assert result.size() == ms.size()

    def test_classify_with(self, ms):
        result = ms.classify_with(lambda item, count: count > 2)
        assert result[True] == Multiset("b b b b d d d".split())
        assert result[False] == Multiset("a a c".split())
        assert sum(bucket.size() for bucket in result.values_at(True, False)) == ms.size()
