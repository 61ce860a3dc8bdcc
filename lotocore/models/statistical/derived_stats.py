"""
lotocore/models/statistical/derived_stats.py
Per-game numeric features used by both the filter engine and the scorer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from lotocore.models.game import Game, UniverseConfig, validate_numbers


@dataclass(frozen=True)
class DerivedStats:
    size: int
    even_count: int
    odd_count: int
    sum: int
    frame_count: int
    center_count: int
    prime_count: int
    fibonacci_count: int
    longest_run: int
    sequences: tuple[str, ...]       # runs of 2+ shown as "a-b"
    consecutive_pairs: int
    consecutive_trios: int
    row_counts: tuple[int, ...]      # one slot per grid row
    column_counts: tuple[int, ...]   # one slot per grid column
    row_coverage: int
    column_coverage: int
    amplitude: int


def row_of(number: int, row_size: int) -> int:
    return math.ceil(number / row_size)


def column_of(number: int, row_size: int) -> int:
    return (number - 1) % row_size + 1


def _runs(sorted_nums: list[int]) -> list[tuple[int, int]]:
    """Maximal runs of consecutive integers as (start, end) pairs."""
    runs: list[tuple[int, int]] = []
    if not sorted_nums:
        return runs
    start = prev = sorted_nums[0]
    for num in sorted_nums[1:]:
        if num == prev + 1:
            prev = num
            continue
        runs.append((start, prev))
        start = prev = num
    runs.append((start, prev))
    return runs


def longest_run(numbers: Iterable[int]) -> int:
    runs = _runs(sorted(numbers))
    return max((end - start + 1 for start, end in runs), default=0)


def compute_stats(game: Game | Iterable[int], universe: UniverseConfig) -> DerivedStats:
    # Out-of-range numbers would land in the wrong grid slot
    nums = list(validate_numbers(game.numbers if isinstance(game, Game) else game, universe))
    size = len(nums)

    runs = _runs(nums)
    pairs = sum(1 for a, b in zip(nums, nums[1:]) if b == a + 1)
    trios = sum(1 for a, c in zip(nums, nums[2:]) if c == a + 2)

    rows = [0] * universe.n_rows
    cols = [0] * universe.row_size
    for n in nums:
        rows[row_of(n, universe.row_size) - 1] += 1
        cols[column_of(n, universe.row_size) - 1] += 1

    even = sum(1 for n in nums if n % 2 == 0)
    frame = sum(1 for n in nums if n in universe.frame_numbers)
    return DerivedStats(
        size=size,
        even_count=even,
        odd_count=size - even,
        sum=sum(nums),
        frame_count=frame,
        center_count=size - frame,
        prime_count=sum(1 for n in nums if n in universe.prime_numbers),
        fibonacci_count=sum(1 for n in nums if n in universe.fibonacci_numbers),
        longest_run=max((end - start + 1 for start, end in runs), default=0),
        sequences=tuple(f"{start}-{end}" for start, end in runs if end > start),
        consecutive_pairs=pairs,
        consecutive_trios=trios,
        row_counts=tuple(rows),
        column_counts=tuple(cols),
        row_coverage=sum(1 for c in rows if c),
        column_coverage=sum(1 for c in cols if c),
        amplitude=nums[-1] - nums[0] if nums else 0,
    )
