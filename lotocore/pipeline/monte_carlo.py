"""
lotocore/pipeline/monte_carlo.py
Monte Carlo baseline: how many uniformly random games pass the balance
filters, and how frame / prime / fibonacci counts and sums are distributed.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lotocore.models.game import Draw, Game, UniverseConfig
from lotocore.models.statistical.derived_stats import compute_stats
from lotocore.scoring.filter_engine import FILTER_KEYS, passes_filters
from lotocore.utils.errors import InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("pipeline.monte_carlo")


@dataclass(frozen=True)
class MonteCarloResult:
    simulations: int
    balanced_games: int
    probability_of_balanced: float
    # {metric: {value: occurrences}}; keys frame_count, prime_count, fibonacci_count, sum
    distributions: dict[str, dict[int, int]]


def run_monte_carlo(
    universe: UniverseConfig,
    simulations: int,
    last_draw: Draw | None = None,
    filter_keys: Sequence[str] | None = None,
    game_size: int | None = None,
    seed: int | None = None,
) -> MonteCarloResult:
    """
    Draw ``simulations`` random games (repeats allowed, as in real play) and
    count those accepted by ``filter_keys``, all filters by default.
    """
    if simulations < 1:
        raise InvalidInput(f"simulations must be at least 1, got {simulations}", simulations)
    game_size = game_size or universe.numbers_drawn
    if not 1 <= game_size <= universe.total_numbers:
        raise InvalidInput(f"game_size must be within [1,{universe.total_numbers}], got {game_size}", game_size)
    keys = FILTER_KEYS if filter_keys is None else tuple(filter_keys)

    rng = np.random.default_rng(seed)
    numbers = np.arange(1, universe.total_numbers + 1)
    counters = {name: Counter() for name in ("frame_count", "prime_count", "fibonacci_count", "sum")}
    balanced = 0

    for _ in range(simulations):
        game = Game(tuple(sorted(int(n) for n in rng.choice(numbers, size=game_size, replace=False))))
        if passes_filters(game, keys, last_draw, universe):
            balanced += 1
        stats = compute_stats(game, universe)
        counters["frame_count"][stats.frame_count] += 1
        counters["prime_count"][stats.prime_count] += 1
        counters["fibonacci_count"][stats.fibonacci_count] += 1
        counters["sum"][stats.sum] += 1

    result = MonteCarloResult(
        simulations=simulations,
        balanced_games=balanced,
        probability_of_balanced=balanced / simulations,
        distributions={name: dict(sorted(c.items())) for name, c in counters.items()},
    )
    log.info(
        f"[MC] {simulations} random games of {game_size}: "
        f"{result.probability_of_balanced:.1%} pass {list(keys)}"
    )
    return result
