"""
lotocore/pipeline/closing_tester.py
Build a closing and replay it against a window of past draws.
"""
from __future__ import annotations

from typing import Sequence

from lotocore.closing.simulator import SimulationResult, simulate
from lotocore.closing.strategies import closing_statistics, generate_closing
from lotocore.closing.templates import get_wheel_template
from lotocore.closing.wheel_engine import Wheel, templated_closing
from lotocore.models.game import Draw, UniverseConfig
from lotocore.utils.draw_source import DrawSource
from lotocore.utils.errors import EmptyHistory, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("pipeline.closing_tester")

DEFAULT_LAST_N = 50


def load_window(
    source: DrawSource,
    last_n: int | None = None,
    sequence_range: tuple[int, int] | None = None,
) -> list[Draw]:
    """Last N draws, an inclusive sequence range, or the last 50 by default."""
    if last_n is not None and sequence_range is not None:
        raise InvalidInput("Pass either last_n or sequence_range, not both")
    if last_n is not None and last_n < 1:
        raise InvalidInput(f"last_n must be at least 1, got {last_n}", last_n)
    if sequence_range is not None:
        return source.list_draws(order_by="asc", sequence_range=sequence_range)
    return source.list_draws(order_by="desc", limit=DEFAULT_LAST_N if last_n is None else last_n)


def run_closing_test(
    source: DrawSource,
    pool: Sequence[int],
    universe: UniverseConfig,
    guaranteed_hits: int,
    strategy: str = "optimized",
    template_name: str | None = None,
    fixed_numbers: Sequence[int] = (),
    game_size: int | None = None,
    max_games: int = 100,
    last_n: int | None = None,
    sequence_range: tuple[int, int] | None = None,
) -> tuple[Wheel, dict, SimulationResult]:
    """
    Full flow:
    1. Build the closing (template when named, strategy otherwise)
    2. Load the draw window
    3. Simulate and return (closing, closing statistics, simulation)
    """
    if template_name:
        wheel = templated_closing(pool, get_wheel_template(template_name), universe)
    else:
        wheel = generate_closing(
            pool, strategy, universe,
            game_size=game_size, max_games=max_games, fixed_numbers=fixed_numbers,
        )

    draws = load_window(source, last_n=last_n, sequence_range=sequence_range)
    if not draws:
        raise EmptyHistory("closing test window")

    result = simulate(wheel, draws, guaranteed_hits)
    stats = closing_statistics(wheel, universe)
    log.info(
        f"[TEST] {template_name or strategy}: {stats['total_games']} games, "
        f"success {result.summary.success_rate:.1%} over {result.summary.draws_tested} draws"
    )
    return wheel, stats, result
