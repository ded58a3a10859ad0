#!/usr/bin/env python3
"""
Demo and benchmark for counted multisets and multimaps.

Usage:
    python3 demo.py --multiset    # Set algebra, transforms and flattening
    python3 demo.py --multimap    # Buckets, cleanup, classify and invert
    python3 demo.py --benchmark   # Distinct-once versus expanding traversal
"""

import argparse
import time

from counted import Multimap, Multiset, to_multiset


# =============================================================================
# Formatting Utilities
# =============================================================================


def format_multiset(ms: Multiset) -> str:
    """Render as '#count item' entries in insertion order."""
    parts = []
    ms.each_pair(lambda item, count: parts.append(f"#{count} {item!r}"))
    return "{" + ", ".join(parts) + "}"


def format_multimap(mm: Multimap) -> str:
    parts = []
    mm.each_pair_list(lambda key, bucket: parts.append(f"{key!r}=>{format_multiset(bucket)}"))
    return "{" + ", ".join(parts) + "}"


def format_time(seconds: float) -> str:
    """Format time with appropriate unit."""
    if seconds >= 1:
        return f"{seconds:.2f}s"
    if seconds >= 0.001:
        return f"{seconds*1000:.2f}ms"
    return f"{seconds*1_000_000:.1f}us"


# =============================================================================
# Demos
# =============================================================================


def demo_multiset():
    print("=" * 60)
    print("Multiset")
    print("=" * 60)

    a = to_multiset({1: 5, 4: 2, 6: 0})
    b = Multiset.of(1, 1, 4, 4, 6, 6)
    print(f"a      = {format_multiset(a)}")
    print(f"b      = {format_multiset(b)}")
    print(f"a + b  = {format_multiset(a + b)}")
    print(f"a - b  = {format_multiset(a - b)}")
    print(f"a & b  = {format_multiset(a & b)}")
    print(f"a | b  = {format_multiset(a | b)}")

    print(f"reject_update(== 3) -> {a.reject_update(lambda item: item == 3)}")
    a.reject_update(lambda item: item == 4)
    a.add(3)
    a.add(4, 10)
    print(f"after updates: {format_multiset(a)}")

    nested = Multiset.of(6, 6, 3, 4, Multiset.of(5, 8), Multiset.of(6, Multiset.of(3, 8), 8), 8)
    nested.flatten_update()
    print(f"flattened: {format_multiset(nested)}")
    print(f"second flatten_update -> {nested.flatten_update()}")


def demo_multimap():
    print("=" * 60)
    print("Multimap")
    print("=" * 60)

    mm = Multimap()
    mm["a"]
    print(f"after reading 'a': keys = {mm.keys()}")
    mm["a"].add("x")
    print(f"after adding to 'a': keys = {mm.keys()}")

    words = Multiset("the cat and the hat and the bat".split())
    by_length = words.classify(len)
    print(f"classified by length: {format_multimap(by_length)}")
    print(f"inverted: {format_multimap(by_length.invert())}")


def run_benchmark(distinct: int = 1000, multiplicity: int = 1000):
    print("=" * 60)
    print(f"Traversal: {distinct} items x {multiplicity} occurrences")
    print("=" * 60)

    ms = Multiset.from_counts({i: multiplicity for i in range(distinct)})

    start = time.perf_counter()
    ms.map(lambda item: item + 1)
    distinct_time = time.perf_counter() - start

    start = time.perf_counter()
    total = 0
    for _ in ms:
        total += 1
    expanding_time = time.perf_counter() - start

    print(f"  map (distinct-once):    {format_time(distinct_time)}")
    print(f"  iter (expanding, {total}): {format_time(expanding_time)}")


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="counted demo")
    parser.add_argument("--multiset", action="store_true", help="Run multiset demo")
    parser.add_argument("--multimap", action="store_true", help="Run multimap demo")
    parser.add_argument("--benchmark", action="store_true", help="Run traversal benchmark")
    args = parser.parse_args(argv)

    if not (args.multiset or args.multimap or args.benchmark):
        args.multiset = args.multimap = True

    if args.multiset:
        demo_multiset()
    if args.multimap:
        demo_multimap()
    if args.benchmark:
        run_benchmark()


if __name__ == "__main__":
    main()
