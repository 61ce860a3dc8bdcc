"""
lotocore/closing/wheel_engine.py
Build closings ("wheels") from a player's pool: either every k-subset of the
pool, or the games of a precomputed covering template.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from lotocore.closing.templates import WheelTemplate
from lotocore.combinatorics.combination_generator import CancelSignal, check_ceiling, combinations
from lotocore.models.game import Draw, Game, UniverseConfig, validate_numbers
from lotocore.scoring.filter_engine import filter_games
from lotocore.utils import config
from lotocore.utils.errors import InsufficientPool, InvalidInput, TemplateMismatch
from lotocore.utils.logger import get_logger

log = get_logger("closing.wheel")


@dataclass(frozen=True)
class Guarantee:
    """At least ``hits`` matches in some game whenever ``chosen_size`` drawn numbers fall in the pool."""

    chosen_size: int
    hits: int


@dataclass(frozen=True)
class Wheel:
    pool: tuple[int, ...]
    games: tuple[Game, ...]
    guarantee: Guarantee | None = None
    template_name: str | None = None
    strategy: str | None = None

    def __len__(self) -> int:
        return len(self.games)


def validate_pool(pool: Sequence[int], universe: UniverseConfig) -> tuple[int, ...]:
    """Check pool numbers are unique and in range; keeps the caller's order."""
    validate_numbers(pool, universe, what="pool")
    return tuple(pool)


def _check_game_size(game_size: int, universe: UniverseConfig) -> None:
    if not universe.min_game_size <= game_size <= universe.max_game_size:
        raise InvalidInput(
            f"Game size {game_size} outside [{universe.min_game_size},{universe.max_game_size}]"
            f" for {universe.name}",
            game_size,
        )


def exhaustive_closing(
    pool: Sequence[int],
    game_size: int,
    universe: UniverseConfig,
    max_games: int | None = None,
    cancel: CancelSignal | None = None,
) -> Wheel:
    """
    Every ``game_size``-subset of the pool as one game. Refused before any
    enumeration when C(len(pool), game_size) is above ``max_games``
    (default ``MAX_CLOSING_GAMES``).
    """
    pool = validate_pool(pool, universe)
    _check_game_size(game_size, universe)
    if len(pool) < game_size:
        raise InsufficientPool(len(pool), game_size)

    ceiling = config.MAX_CLOSING_GAMES if max_games is None else max_games
    total = check_ceiling(len(pool), game_size, ceiling)
    log.info(f"Exhaustive closing: C({len(pool)},{game_size}) = {total} games")

    ordered = sorted(pool)
    games = tuple(Game(combo) for combo in combinations(ordered, game_size, max_results=ceiling, cancel=cancel))
    return Wheel(pool=pool, games=games, guarantee=Guarantee(chosen_size=game_size, hits=game_size))


def templated_closing(pool: Sequence[int], template: WheelTemplate, universe: UniverseConfig) -> Wheel:
    """Map the ordered pool through each index tuple of the template."""
    pool = validate_pool(pool, universe)
    if len(pool) != template.pool_size:
        raise TemplateMismatch(template.name, template.pool_size, len(pool))
    _check_game_size(template.game_size, universe)

    games = tuple(
        Game.create((pool[i] for i in indices), universe)
        for indices in template.index_tuples
    )
    log.info(
        f"Template {template.name}: {len(games)} games, guarantee {template.guaranteed_hits} hits "
        f"if {template.chosen_draw_size} drawn in pool"
    )
    return Wheel(
        pool=pool,
        games=games,
        guarantee=Guarantee(chosen_size=template.chosen_draw_size, hits=template.guaranteed_hits),
        template_name=template.name,
    )


def filter_closing(
    wheel: Wheel,
    filter_keys: Sequence[str],
    last_draw: Draw | None,
    universe: UniverseConfig,
) -> Wheel:
    """
    Shrink a closing with the filter engine. Pool and guarantee metadata are
    kept; after filtering the guarantee is best-effort only.
    """
    kept = filter_games(wheel.games, filter_keys, last_draw, universe)
    return replace(wheel, games=tuple(kept))
