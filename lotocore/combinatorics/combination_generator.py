"""
lotocore/combinatorics/combination_generator.py
Backtracking enumeration of k-subsets with a feasibility prune and an
analytic cardinality check before any work is done.
"""
from __future__ import annotations

import math
from typing import Iterator, Protocol, Sequence, TypeVar

from lotocore.utils.errors import CombinatorialLimitExceeded, GenerationCancelled, InvalidInput

T = TypeVar("T")


class CancelSignal(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


def count_combinations(n: int, k: int) -> int:
    """C(n, k); 0 when k > n."""
    if k < 0 or n < 0:
        raise InvalidInput(f"n and k must be non-negative, got n={n}, k={k}", (n, k))
    return math.comb(n, k)


def check_ceiling(n: int, k: int, ceiling: int | None) -> int:
    """Return C(n, k) or raise CombinatorialLimitExceeded if it is above the ceiling."""
    count = count_combinations(n, k)
    if ceiling is not None and count > ceiling:
        raise CombinatorialLimitExceeded(n, k, count, ceiling)
    return count


def iter_combinations(
    items: Sequence[T],
    k: int,
    cancel: CancelSignal | None = None,
) -> Iterator[tuple[T, ...]]:
    """
    Yield every k-subset of ``items`` once, in lexicographic order of index
    positions. Items are distinguished by position; duplicates are kept.
    """
    n = len(items)
    if k < 0:
        raise InvalidInput(f"k must be non-negative, got {k}", k)
    if k > n:
        return

    current: list[T] = []

    def backtrack(start: int, depth: int) -> Iterator[tuple[T, ...]]:
        if len(current) == k:
            yield tuple(current)
            return
        if len(current) + (n - start) < k:
            return
        for i in range(start, n):
            # Top-level branches only
            if depth == 0 and cancel is not None and cancel.is_set():
                raise GenerationCancelled(f"Enumeration of C({n},{k}) cancelled at branch {i}")
            current.append(items[i])
            yield from backtrack(i + 1, depth + 1)
            current.pop()

    yield from backtrack(0, 0)


def combinations(
    items: Sequence[T],
    k: int,
    max_results: int | None = None,
    cancel: CancelSignal | None = None,
) -> list[tuple[T, ...]]:
    """
    All k-subsets of ``items`` as a list. The result size is computed before
    enumerating; if it is above ``max_results`` nothing is generated.
    Generation is all-or-nothing: a cancelled run returns no partial list.
    """
    if k < 0:
        raise InvalidInput(f"k must be non-negative, got {k}", k)
    check_ceiling(len(items), k, max_results)
    return list(iter_combinations(items, k, cancel=cancel))
