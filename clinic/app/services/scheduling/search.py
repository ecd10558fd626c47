"""
Search strategies used by the alternative finder.

Two strategies:

- collect_all: every candidate that passes, in candidate order
- find_first: the first candidate that passes, or None

The "same slot, other room" tier collects all matches while the
"next/previous slot" tiers stop at the first one.
"""

from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def collect_all(predicate: Callable[[T], bool], candidates: Iterable[T]) -> list[T]:
    return [c for c in candidates if predicate(c)]


def find_first(predicate: Callable[[T], bool], candidates: Iterable[T]) -> Optional[T]:
    for candidate in candidates:
        if predicate(candidate):
            return candidate
    return None
