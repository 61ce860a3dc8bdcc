"""
lotocore/pipeline/game_generator.py
Generate candidate games weighted by cycle urgency, then screen them with the
filter engine and (optionally) a minimum quality score.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lotocore.models.game import Draw, Game, UniverseConfig, validate_numbers
from lotocore.models.statistical.cycle_analyzer import CycleAnalyzer, CycleStat
from lotocore.models.statistical.derived_stats import DerivedStats, compute_stats
from lotocore.scoring.filter_engine import passes_filters
from lotocore.scoring.quality_score import score_game
from lotocore.utils.draw_source import DrawSource
from lotocore.utils.errors import EmptyHistory, InsufficientPool, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("pipeline.generator")

ATTEMPTS_PER_GAME = 200
MIN_WEIGHT = 0.1   # lets zero-score numbers still be drawn


@dataclass(frozen=True)
class GeneratedGame:
    game: Game
    metrics: DerivedStats
    avg_score: float
    quality: int | None = None


def number_scores(
    cycle_stats: Sequence[CycleStat],
    use_weighted_score: bool = False,
    weights: dict[str, float] | None = None,
) -> dict[int, float]:
    """
    Per-number selection score: urgency by default, the precomputed weighted
    score, or a custom {"urgency": w1, "frequency": w2} blend.
    """
    scores: dict[int, float] = {}
    for s in cycle_stats:
        if weights:
            value = s.urgency * weights.get("urgency", 0.0) + s.frequency_z * weights.get("frequency", 0.0)
        elif use_weighted_score:
            value = s.weighted_score
        else:
            value = s.urgency
        scores[s.number] = round(value, 2)
    return scores


def _base_pool(
    scores: dict[int, float],
    universe: UniverseConfig,
    top_n: int,
    min_size: int,
    blocked: set[int],
) -> list[int]:
    ranked = [n for n in sorted(scores, key=lambda n: (-scores[n], n)) if n not in blocked]
    pool = ranked[:top_n]
    # Pad with the lowest remaining numbers when the top-N is too small
    if len(pool) < min_size:
        for n in universe.numbers:
            if len(pool) >= min_size:
                break
            if n not in blocked and n not in pool:
                pool.append(n)
    return pool


def generate_cycle_games(
    cycle_stats: Sequence[CycleStat],
    universe: UniverseConfig,
    num_games: int,
    game_size: int | None = None,
    top_n: int = 20,
    filter_keys: Sequence[str] = (),
    last_draw: Draw | None = None,
    use_weighted_score: bool = False,
    weights: dict[str, float] | None = None,
    fixed_numbers: Sequence[int] = (),
    excluded_numbers: Sequence[int] = (),
    min_quality: int | None = None,
    seed: int | None = None,
) -> list[GeneratedGame]:
    """
    Weighted sampling without replacement from the top-N most urgent numbers.
    Stops after ``num_games`` distinct accepted games or ``num_games * 200``
    attempts, whichever comes first. Same seed, same games.
    """
    game_size = game_size or universe.min_game_size
    if not universe.min_game_size <= game_size <= universe.max_game_size:
        raise InvalidInput(
            f"game_size must be within [{universe.min_game_size},{universe.max_game_size}], got {game_size}",
            game_size,
        )
    if num_games < 1:
        raise InvalidInput(f"num_games must be at least 1, got {num_games}", num_games)

    fixed = validate_numbers(fixed_numbers, universe, what="fixed numbers")
    excluded = set(validate_numbers(excluded_numbers, universe, what="excluded numbers"))
    if excluded & set(fixed):
        raise InvalidInput(f"Numbers both fixed and excluded: {sorted(excluded & set(fixed))}")
    var_count = game_size - len(fixed)
    if var_count < 0:
        raise InvalidInput(f"{len(fixed)} fixed numbers do not fit in games of {game_size}", fixed)

    scores = number_scores(cycle_stats, use_weighted_score, weights)
    available = universe.total_numbers - len(excluded) - len(fixed)
    min_pool = min(max(game_size * 2, 15), available)
    pool = _base_pool(scores, universe, top_n, min_pool, excluded | set(fixed))
    if len(pool) < var_count:
        raise InsufficientPool(len(pool), var_count)

    rng = np.random.default_rng(seed)
    weights_arr = np.array([max(scores.get(n, 0.0), MIN_WEIGHT) for n in pool], dtype=float)
    p = weights_arr / weights_arr.sum()

    accepted: dict[tuple[int, ...], GeneratedGame] = {}
    max_attempts = num_games * ATTEMPTS_PER_GAME
    attempts = 0
    while len(accepted) < num_games and attempts < max_attempts:
        attempts += 1
        picked = rng.choice(pool, size=var_count, replace=False, p=p) if var_count else []
        numbers = tuple(sorted(fixed + tuple(int(n) for n in picked)))
        if numbers in accepted:
            continue
        game = Game(numbers)
        if not passes_filters(game, filter_keys, last_draw, universe):
            continue
        quality = None
        if min_quality is not None:
            quality = score_game(game, universe).score
            if quality < min_quality:
                continue
        accepted[numbers] = GeneratedGame(
            game=game,
            metrics=compute_stats(game, universe),
            avg_score=round(sum(scores.get(n, 0.0) for n in numbers) / len(numbers), 2),
            quality=quality,
        )

    if len(accepted) < num_games:
        log.warning(f"Only {len(accepted)}/{num_games} games accepted after {attempts} attempts")
    log.info(f"Generated {len(accepted)} games of {game_size} from a pool of {len(pool)}")
    return list(accepted.values())


def generate_random_games(
    universe: UniverseConfig,
    num_games: int,
    game_size: int | None = None,
    seed: int | None = None,
) -> list[Game]:
    """Uniform random games with no history input, for baselines."""
    game_size = game_size or universe.min_game_size
    rng = np.random.default_rng(seed)
    numbers = np.arange(1, universe.total_numbers + 1)
    games: dict[tuple[int, ...], Game] = {}
    attempts = 0
    while len(games) < num_games and attempts < num_games * 100:
        attempts += 1
        picked = tuple(sorted(int(n) for n in rng.choice(numbers, size=game_size, replace=False)))
        games.setdefault(picked, Game.create(picked, universe))
    return list(games.values())


def generate_from_history(
    source: DrawSource,
    universe: UniverseConfig,
    num_games: int,
    **options,
) -> list[GeneratedGame]:
    """
    Full flow:
    1. Load the history from the draw source
    2. Compute cycle statistics
    3. Generate games, screening 'repeatedFromLast' against the latest draw
       unless the caller passes its own last_draw
    """
    draws = source.list_draws(order_by="asc")
    if not draws:
        raise EmptyHistory("cycle-weighted generation")
    stats = CycleAnalyzer(universe).cycle_stats(draws)
    options.setdefault("last_draw", draws[-1])
    return generate_cycle_games(stats, universe, num_games, **options)
