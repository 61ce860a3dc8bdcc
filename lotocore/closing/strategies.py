"""
lotocore/closing/strategies.py
Heuristic closings built under a maximum game count, plus closing statistics.

Strategies:
  balanced:  rotate through the pool in a low/high interleaved order so every
              number is used and value range / parity stay even across games.
  coverage:  greedy: each new game maximizes the number of pool pairs not yet
              covered by earlier games.
  optimized: greedy with a weighted score mixing pair coverage and balance.

All strategies are deterministic, never exceed ``max_games`` and put every
fixed number in every game.
"""
from __future__ import annotations

import math
from itertools import combinations as pairs_of
from typing import Sequence

from lotocore.closing.wheel_engine import Wheel, validate_pool
from lotocore.models.game import Game, UniverseConfig, validate_numbers
from lotocore.utils.errors import InsufficientPool, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("closing.strategies")

STRATEGIES = ("balanced", "coverage", "optimized")
OPTIMIZED_COVERAGE_WEIGHT = 0.5


def _spread_order(numbers: Sequence[int]) -> list[int]:
    """Interleave the low and high halves: 1..6 -> 1, 4, 2, 5, 3, 6."""
    ordered = sorted(numbers)
    half = (len(ordered) + 1) // 2
    low, high = ordered[:half], ordered[half:]
    out: list[int] = []
    for i in range(half):
        out.append(low[i])
        if i < len(high):
            out.append(high[i])
    return out


def _balanced(variable: list[int], fixed: tuple[int, ...], var_count: int, max_games: int) -> list[tuple[int, ...]]:
    order = _spread_order(variable)
    desired = min(math.ceil(len(order) / var_count), max_games)
    games: list[tuple[int, ...]] = []
    for i in range(desired):
        chosen = [order[(i * var_count + j) % len(order)] for j in range(var_count)]
        games.append(tuple(sorted(fixed + tuple(chosen))))
    return games


def _greedy(
    variable: list[int],
    fixed: tuple[int, ...],
    var_count: int,
    max_games: int,
    coverage_weight: float,
) -> list[tuple[int, ...]]:
    uncovered = set(pairs_of(sorted(variable), 2))
    appearances = {n: 0 for n in variable}
    games: list[tuple[int, ...]] = []

    while len(games) < max_games:
        if not uncovered and all(appearances.values()):
            break

        selected = [min(variable, key=lambda n: (appearances[n], n))]
        while len(selected) < var_count:
            max_app = max(appearances.values())
            evens = sum(1 for n in selected if n % 2 == 0)
            want_even = evens < (len(selected) + 1) / 2

            def score(c: int) -> float:
                new_pairs = sum(1 for s in selected if (min(s, c), max(s, c)) in uncovered)
                balance = 1 - appearances[c] / (max_app + 1)
                balance += 0.5 if (c % 2 == 0) == want_even else 0.0
                return coverage_weight * new_pairs / len(selected) + (1 - coverage_weight) * balance

            candidates = [c for c in variable if c not in selected]
            selected.append(min(candidates, key=lambda c: (-score(c), appearances[c], c)))

        game = tuple(sorted(fixed + tuple(selected)))
        if game in games:
            break
        games.append(game)
        for n in selected:
            appearances[n] += 1
        uncovered.difference_update(pairs_of(sorted(selected), 2))

    return games


def generate_closing(
    pool: Sequence[int],
    strategy: str,
    universe: UniverseConfig,
    game_size: int | None = None,
    max_games: int = 100,
    fixed_numbers: Sequence[int] = (),
) -> Wheel:
    if strategy not in STRATEGIES:
        raise InvalidInput(f"Unknown closing strategy '{strategy}', expected one of {STRATEGIES}", strategy)
    if max_games < 1:
        raise InvalidInput(f"max_games must be at least 1, got {max_games}", max_games)

    pool = validate_pool(pool, universe)
    fixed = validate_numbers(fixed_numbers, universe, what="fixed numbers")
    game_size = game_size or universe.min_game_size
    if not universe.min_game_size <= game_size <= universe.max_game_size:
        raise InvalidInput(
            f"Game size {game_size} outside [{universe.min_game_size},{universe.max_game_size}]", game_size
        )
    if len(fixed) > game_size:
        raise InvalidInput(f"{len(fixed)} fixed numbers do not fit in games of {game_size}", fixed)

    variable = sorted(n for n in pool if n not in fixed)
    var_count = game_size - len(fixed)
    if len(variable) < var_count:
        raise InsufficientPool(len(variable), var_count)

    if var_count == 0:
        raw = [fixed]
    elif strategy == "balanced":
        raw = _balanced(variable, fixed, var_count, max_games)
    elif strategy == "coverage":
        raw = _greedy(variable, fixed, var_count, max_games, coverage_weight=1.0)
    else:
        raw = _greedy(variable, fixed, var_count, max_games, coverage_weight=OPTIMIZED_COVERAGE_WEIGHT)

    # dict keeps first-seen order while dropping repeats
    games = tuple(Game.create(g, universe) for g in dict.fromkeys(raw))
    log.info(f"Closing '{strategy}': {len(games)} games of {game_size} from a pool of {len(pool)}")
    return Wheel(pool=pool, games=games, strategy=strategy)


def closing_statistics(wheel: Wheel, universe: UniverseConfig) -> dict:
    """Cost and coverage figures for a closing."""
    sizes = sorted({g.size for g in wheel.games})
    costs = [universe.bet_prices.get(g.size, 0.0) for g in wheel.games]
    used = set().union(*(g.number_set for g in wheel.games)) if wheel.games else set()
    pool_pairs = set(pairs_of(sorted(wheel.pool), 2))
    covered_pairs = set()
    for g in wheel.games:
        covered_pairs.update(pairs_of(g.numbers, 2))

    return {
        "total_games": len(wheel.games),
        "game_sizes": sizes,
        "cost_per_game": costs[0] if len(sizes) == 1 else None,
        "total_cost": sum(costs),
        "coverage": 100.0 * len(used & set(wheel.pool)) / len(wheel.pool) if wheel.pool else 0.0,
        "pair_coverage": 100.0 * len(covered_pairs & pool_pairs) / len(pool_pairs) if pool_pairs else 100.0,
        "guaranteed_hits": wheel.guarantee.hits if wheel.guarantee else None,
    }


def theoretical_estimate(pool_size: int, game_size: int, guaranteed_hits: int, universe: UniverseConfig) -> dict:
    """Rough game-count estimate for a closing before it is generated."""
    min_games = max(1, math.ceil(pool_size / game_size))
    strength = guaranteed_hits / universe.numbers_drawn
    factor = 2.0 if strength >= 5 / 6 else (1.5 if strength >= 4 / 6 else 1.2)
    recommended = math.ceil(min_games * factor)
    return {
        "min_games_theoretical": min_games,
        "recommended_games": recommended,
        "estimated_cost": recommended * universe.bet_prices.get(game_size, 0.0),
    }
