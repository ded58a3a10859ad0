"""
Input variants accepted by multiset construction.

A source is always one of three explicit variants:
- CountedPairs: explicit (item, count) pairs
- RawItems: an iterable whose every element is one occurrence
- TextLines: a text whose every line is one occurrence

classify_source() picks the variant for an arbitrary object with a closed set
of isinstance checks, so callers that know what they hold can build the
variant directly and skip inference.
"""

import logging
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

TEXT_HINT = (
    "Strings are not parsed as items or counts. "
    "To store each line of a text, use Multiset.from_text_lines(text)."
)


@dataclass(frozen=True)
class CountedPairs:
    """Explicit (item, count) pairs; repeated items accumulate."""

    pairs: tuple[tuple[Hashable, int], ...]


@dataclass(frozen=True)
class RawItems:
    """Every element is a single occurrence."""

    items: Iterable


@dataclass(frozen=True)
class TextLines:
    """Every line of text is a single occurrence."""

    text: str
    keepends: bool = True  # keep "\n" on each line, as read from a file

    def lines(self) -> list[str]:
        return self.text.splitlines(self.keepends)


Source = CountedPairs | RawItems | TextLines


def counted_pairs(source) -> CountedPairs:
    """
    Read explicit (item, count) pairs from a multiset, mapping or pair iterable.

    Args:
        source: Multiset, Mapping of item -> count, or iterable of 2-tuples

    Returns:
        CountedPairs in source order

    Raises:
        InvalidArgumentError: If source is a str, not iterable, or holds
            something other than (item, count) pairs
    """
    from .multiset import Multiset

    if isinstance(source, Multiset):
        return CountedPairs(tuple(source.each_pair()))
    if isinstance(source, (str, bytes)):
        raise InvalidArgumentError(TEXT_HINT)
    if isinstance(source, Mapping):
        return CountedPairs(tuple(source.items()))
    if not isinstance(source, Iterable):
        raise InvalidArgumentError(
            f"Source of counts must be a mapping or iterable of pairs, "
            f"got {type(source).__name__}"
        )
    pairs = []
    for entry in source:
        if isinstance(entry, (str, bytes)) or not isinstance(entry, Iterable):
            raise InvalidArgumentError(f"Expected an (item, count) pair, got {entry!r}")
        entry = tuple(entry)
        if len(entry) != 2:
            raise InvalidArgumentError(f"Expected an (item, count) pair, got {entry!r}")
        pairs.append(entry)
    return CountedPairs(tuple(pairs))


def classify_source(source, text: bool = False) -> Source:
    """
    Choose the construction variant for source.

    Multisets and mappings are read as counts, any other iterable as raw
    items. A str is read as text lines only when text is True.

    Args:
        source: Object to classify
        text: Whether a str source is accepted as TextLines

    Returns:
        One of CountedPairs, RawItems, TextLines

    Raises:
        InvalidArgumentError: If source is a str (and text is False) or is
            not iterable
    """
    from .multiset import Multiset

    if isinstance(source, (CountedPairs, RawItems, TextLines)):
        variant = source
    elif isinstance(source, str):
        if not text:
            raise InvalidArgumentError(TEXT_HINT)
        variant = TextLines(source)
    elif isinstance(source, (Multiset, Mapping)):
        variant = counted_pairs(source)
    elif isinstance(source, bytes):
        raise InvalidArgumentError(TEXT_HINT)
    elif isinstance(source, Iterable):
        variant = RawItems(source)
    else:
        raise InvalidArgumentError(
            f"Source of Multiset must be a mapping or an iterable, "
            f"got {type(source).__name__}"
        )
    logger.debug("Classified %s source as %s", type(source).__name__, type(variant).__name__)
    return variant
