"""
lotocore/models/game.py
Value objects shared by every module: universe configuration, draws and games.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from lotocore.utils.errors import InvalidInput


def _primes_up_to(limit: int) -> frozenset[int]:
    primes = set()
    for n in range(2, limit + 1):
        if all(n % p for p in range(2, math.isqrt(n) + 1)):
            primes.add(n)
    return frozenset(primes)


def _fibonacci_up_to(limit: int) -> frozenset[int]:
    fib = set()
    a, b = 1, 2
    while a <= limit:
        fib.add(a)
        a, b = b, a + b
    return frozenset(fib)


def _frame_of_grid(total_numbers: int, row_size: int) -> frozenset[int]:
    """Border of the betting slip: first and last rows, first and last columns."""
    n_rows = math.ceil(total_numbers / row_size)
    frame = set()
    for num in range(1, total_numbers + 1):
        row = math.ceil(num / row_size)
        col = (num - 1) % row_size + 1
        if row in (1, n_rows) or col in (1, row_size):
            frame.add(num)
    return frozenset(frame)


@dataclass(frozen=True)
class UniverseConfig:
    """
    Describes one lottery product. Nothing in the core hardcodes these values;
    they always arrive through this object.
    """

    name: str
    total_numbers: int
    numbers_drawn: int
    min_game_size: int
    max_game_size: int
    row_size: int
    frame_numbers: frozenset[int]
    prime_numbers: frozenset[int]
    fibonacci_numbers: frozenset[int]
    # {filter_key: (lo, hi)} for games of size numbers_drawn; None = open bound
    filters: dict[str, tuple[int | None, int | None]] = field(default_factory=dict)
    # {hits: tier_label}
    prize_tiers: dict[int, str] = field(default_factory=dict)
    # {game_size: price}
    bet_prices: dict[int, float] = field(default_factory=dict)
    # Quality-score grid caps; None = derived from the game size
    max_per_row: int | None = None
    max_per_column: int | None = None

    @property
    def numbers(self) -> range:
        return range(1, self.total_numbers + 1)

    @property
    def n_rows(self) -> int:
        return math.ceil(self.total_numbers / self.row_size)

    @property
    def average_number(self) -> float:
        return (self.total_numbers + 1) / 2

    @classmethod
    def from_dict(cls, name: str, cfg: dict[str, Any]) -> "UniverseConfig":
        total = int(cfg["total_numbers"])
        row_size = int(cfg.get("row_size", 10))
        if total < 1 or row_size < 1:
            raise InvalidInput(f"Invalid universe {name}: total_numbers={total}, row_size={row_size}")
        drawn = int(cfg["numbers_drawn"])
        k_min = int(cfg.get("min_game_size", drawn))
        k_max = int(cfg.get("max_game_size", k_min))
        if not 1 <= k_min <= k_max <= total:
            raise InvalidInput(f"Invalid game size bounds for {name}: [{k_min},{k_max}]", (k_min, k_max))

        frame = cfg.get("frame_numbers")
        primes = cfg.get("prime_numbers")
        fib = cfg.get("fibonacci_numbers")
        quality = cfg.get("quality", {})
        return cls(
            name=name,
            total_numbers=total,
            numbers_drawn=drawn,
            min_game_size=k_min,
            max_game_size=k_max,
            row_size=row_size,
            frame_numbers=frozenset(frame) if frame is not None else _frame_of_grid(total, row_size),
            prime_numbers=frozenset(primes) if primes is not None else _primes_up_to(total),
            fibonacci_numbers=frozenset(fib) if fib is not None else _fibonacci_up_to(total),
            filters={
                key: (bounds[0], bounds[1]) for key, bounds in cfg.get("filters", {}).items()
            },
            prize_tiers={int(h): label for h, label in cfg.get("prize_tiers", {}).items()},
            bet_prices={int(k): float(p) for k, p in cfg.get("bet_prices", {}).items()},
            max_per_row=quality.get("max_per_row"),
            max_per_column=quality.get("max_per_column"),
        )


def validate_numbers(numbers: Iterable[int], universe: UniverseConfig, what: str = "game") -> tuple[int, ...]:
    """Return the numbers sorted, or raise InvalidInput on duplicates / out-of-range values."""
    nums = list(numbers)
    if any(isinstance(n, bool) or not isinstance(n, int) for n in nums):
        raise InvalidInput(f"{what} must contain integers only: {nums}", nums)
    if len(set(nums)) != len(nums):
        raise InvalidInput(f"Duplicate numbers in {what}: {sorted(nums)}", nums)
    out_of_range = [n for n in nums if not 1 <= n <= universe.total_numbers]
    if out_of_range:
        raise InvalidInput(
            f"Numbers out of range [1,{universe.total_numbers}] in {what}: {out_of_range}", out_of_range
        )
    return tuple(sorted(nums))


@dataclass(frozen=True)
class Draw:
    """One historical result. Numbers are resolved once into a sorted tuple."""

    sequence_number: int
    draw_date: date | None
    numbers: tuple[int, ...]

    @classmethod
    def create(
        cls,
        sequence_number: int,
        draw_date: date | None,
        numbers: Iterable[int],
        universe: UniverseConfig | None = None,
    ) -> "Draw":
        nums = list(numbers)
        if universe is not None:
            if len(nums) != universe.numbers_drawn:
                raise InvalidInput(
                    f"Draw {sequence_number}: expected {universe.numbers_drawn} numbers, got {len(nums)}", nums
                )
            return cls(sequence_number, draw_date, validate_numbers(nums, universe, f"draw {sequence_number}"))
        if len(set(nums)) != len(nums):
            raise InvalidInput(f"Duplicate numbers in draw {sequence_number}: {nums}", nums)
        return cls(sequence_number, draw_date, tuple(sorted(nums)))

    @property
    def number_set(self) -> frozenset[int]:
        return frozenset(self.numbers)


@dataclass(frozen=True)
class Game:
    numbers: tuple[int, ...]

    @classmethod
    def create(cls, numbers: Iterable[int], universe: UniverseConfig) -> "Game":
        nums = validate_numbers(numbers, universe)
        if not universe.min_game_size <= len(nums) <= universe.max_game_size:
            raise InvalidInput(
                f"Game size {len(nums)} outside [{universe.min_game_size},{universe.max_game_size}]"
                f" for {universe.name}",
                nums,
            )
        return cls(nums)

    @property
    def size(self) -> int:
        return len(self.numbers)

    @property
    def number_set(self) -> frozenset[int]:
        return frozenset(self.numbers)

    def hits(self, numbers: Iterable[int]) -> int:
        return len(self.number_set.intersection(numbers))

    def __iter__(self):
        return iter(self.numbers)

    def __len__(self) -> int:
        return len(self.numbers)
