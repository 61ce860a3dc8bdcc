"""
lotocore/pipeline/exclusion_generator.py
Random games drawn from whatever is left after excluding whole groups of the
slip (quadrants, rows, columns, twins, primes, parity, frame or center).
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from lotocore.models.game import Draw, Game, UniverseConfig, validate_numbers
from lotocore.models.statistical.derived_stats import column_of, row_of
from lotocore.scoring.filter_engine import passes_filters
from lotocore.utils.errors import InsufficientPool, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("pipeline.exclusion")

N_QUADRANTS = 4
DEFAULT_MAX_ATTEMPTS = 10_000


# ── Number groups ─────────────────────────────────────────────────
def quadrant_numbers(quadrant: int, universe: UniverseConfig) -> list[int]:
    """Quadrant q of 1..4 splits 1..N into four consecutive blocks (1-15, 16-30, ... on 60)."""
    if not 1 <= quadrant <= N_QUADRANTS:
        raise InvalidInput(f"quadrant must be within [1,{N_QUADRANTS}], got {quadrant}", quadrant)
    return [n for n in universe.numbers if math.ceil(N_QUADRANTS * n / universe.total_numbers) == quadrant]


def row_numbers(row: int, universe: UniverseConfig) -> list[int]:
    if not 1 <= row <= universe.n_rows:
        raise InvalidInput(f"row must be within [1,{universe.n_rows}], got {row}", row)
    return [n for n in universe.numbers if row_of(n, universe.row_size) == row]


def column_numbers(column: int, universe: UniverseConfig) -> list[int]:
    if not 1 <= column <= universe.row_size:
        raise InvalidInput(f"column must be within [1,{universe.row_size}], got {column}", column)
    return [n for n in universe.numbers if column_of(n, universe.row_size) == column]


def twin_numbers(universe: UniverseConfig) -> list[int]:
    """Two equal digits: 11, 22, 33 ..."""
    return [n for n in universe.numbers if 10 <= n <= 99 and n % 11 == 0]


def exclusion_set(
    universe: UniverseConfig,
    quadrants: Iterable[int] = (),
    rows: Iterable[int] = (),
    columns: Iterable[int] = (),
    twins: bool = False,
    primes: bool = False,
    evens: bool = False,
    odds: bool = False,
    frame: bool = False,
    center: bool = False,
) -> frozenset[int]:
    """Union of every selected group."""
    excluded: set[int] = set()
    for q in quadrants:
        excluded.update(quadrant_numbers(q, universe))
    for r in rows:
        excluded.update(row_numbers(r, universe))
    for c in columns:
        excluded.update(column_numbers(c, universe))
    if twins:
        excluded.update(twin_numbers(universe))
    if primes:
        excluded.update(universe.prime_numbers)
    if evens:
        excluded.update(n for n in universe.numbers if n % 2 == 0)
    if odds:
        excluded.update(n for n in universe.numbers if n % 2)
    if frame:
        excluded.update(universe.frame_numbers)
    if center:
        excluded.update(n for n in universe.numbers if n not in universe.frame_numbers)
    return frozenset(excluded)


# ── Generation ────────────────────────────────────────────────────
def generate_with_exclusions(
    universe: UniverseConfig,
    num_games: int,
    excluded_numbers: Iterable[int] = (),
    fixed_numbers: Sequence[int] = (),
    game_size: int | None = None,
    filter_keys: Sequence[str] = (),
    last_draw: Draw | None = None,
    seed: int | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> list[Game]:
    """
    Full flow:
    1. Available = 1..N minus excluded and fixed numbers
    2. Each attempt: fixed numbers + a uniform sample of the rest
    3. Keep distinct games that pass the filters, until num_games or max_attempts
    """
    game_size = game_size or universe.min_game_size
    if not universe.min_game_size <= game_size <= universe.max_game_size:
        raise InvalidInput(
            f"game_size must be within [{universe.min_game_size},{universe.max_game_size}], got {game_size}",
            game_size,
        )
    fixed = validate_numbers(fixed_numbers, universe, what="fixed numbers")
    excluded = set(validate_numbers(sorted(set(excluded_numbers)), universe, what="excluded numbers"))
    if excluded & set(fixed):
        raise InvalidInput(f"Numbers both fixed and excluded: {sorted(excluded & set(fixed))}")
    needed = game_size - len(fixed)
    if needed < 0:
        raise InvalidInput(f"{len(fixed)} fixed numbers do not fit in games of {game_size}", fixed)

    available = [n for n in universe.numbers if n not in excluded and n not in fixed]
    if len(available) < needed:
        raise InsufficientPool(len(available), needed)

    rng = np.random.default_rng(seed)
    games: dict[tuple[int, ...], Game] = {}
    attempts = 0
    while len(games) < num_games and attempts < max_attempts:
        attempts += 1
        picked = rng.choice(available, size=needed, replace=False) if needed else []
        numbers = tuple(sorted(fixed + tuple(int(n) for n in picked)))
        if numbers in games:
            continue
        game = Game(numbers)
        if passes_filters(game, filter_keys, last_draw, universe):
            games[numbers] = game

    if len(games) < num_games:
        log.warning(f"Only {len(games)}/{num_games} games after {attempts} attempts")
    log.info(f"Generated {len(games)} games of {game_size} from {len(available)} available numbers")
    return list(games.values())
