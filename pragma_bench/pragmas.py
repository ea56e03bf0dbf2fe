"""
Enumeration of pragma combinations.

Given the base list of directives, every subset (the power set) is explored.
Subset `i` contains directive `j` iff bit `j` of `i` is set, so the empty set
comes first, the full set last, and each subset keeps base-list order.
"""

from __future__ import annotations

from typing import Iterator, Sequence, Tuple, TypeVar

from pragma_bench.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

PragmaSet = Tuple[str, ...]

# Above this the 2**n search space gets impractically large.
MAX_RECOMMENDED_PRAGMAS = 10


def count_pragma_sets(base: Sequence[object]) -> int:
    """Number of subsets `iter_pragma_sets` yields for `base`."""
    return 1 << len(base)


def iter_pragma_sets(base: Sequence[T]) -> Iterator[Tuple[T, ...]]:
    """
    Lazily yield every subset of `base` in ascending bitmask order.

    Examples
    --------
    >>> list(iter_pragma_sets(["A", "B"]))
    [(), ('A',), ('B',), ('A', 'B')]
    """
    items = tuple(base)
    if len(items) > MAX_RECOMMENDED_PRAGMAS:
        log.warning(
            "Large pragma search space",
            extra={"pragmas": len(items), "combinations": count_pragma_sets(items)},
        )
    for mask in range(1 << len(items)):
        yield tuple(item for bit, item in enumerate(items) if mask >> bit & 1)


def describe_pragma_set(pragmas: Sequence[str]) -> str:
    """Stable, human-readable label for a pragma set (sorted, `(none)` when empty)."""
    return "; ".join(sorted(pragmas)) if pragmas else "(none)"


__all__ = [
    "MAX_RECOMMENDED_PRAGMAS",
    "PragmaSet",
    "count_pragma_sets",
    "describe_pragma_set",
    "iter_pragma_sets",
]
