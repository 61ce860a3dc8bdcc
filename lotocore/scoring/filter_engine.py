"""
lotocore/scoring/filter_engine.py
Named acceptance criteria over derived statistics. A game passes when every
active criterion accepts it.
"""
from __future__ import annotations

import math
from collections import Counter
from typing import Callable, Iterable, Sequence

from lotocore.models.game import Draw, Game, UniverseConfig
from lotocore.models.statistical.derived_stats import DerivedStats, compute_stats
from lotocore.utils.errors import EmptyHistory, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("scoring.filters")

Bounds = tuple[int | None, int | None]

# Criterion key -> how to read its value from the stats
_VALUE_OF: dict[str, Callable[[DerivedStats], int]] = {
    "evenCount":       lambda s: s.even_count,
    "sum":             lambda s: s.sum,
    "frameCount":      lambda s: s.frame_count,
    "primeCount":      lambda s: s.prime_count,
    "longestSeq":      lambda s: s.longest_run,
    "rowsWithNumbers": lambda s: s.row_coverage,
}

REPEATED_FROM_LAST = "repeatedFromLast"

# Ranges proportional to the game size; the others are absolute ceilings/floors
SCALED_KEYS = frozenset({"evenCount", "sum", "frameCount", "primeCount", REPEATED_FROM_LAST})

FILTER_KEYS: tuple[str, ...] = tuple(_VALUE_OF) + (REPEATED_FROM_LAST,)


def criterion_bounds(key: str, game_size: int, universe: UniverseConfig) -> Bounds | None:
    """
    The acceptance range for ``key`` at ``game_size``. Ranges are configured for
    games of ``numbers_drawn`` numbers and scaled linearly for other sizes.
    """
    bounds = universe.filters.get(key)
    if bounds is None:
        return None
    lo, hi = bounds
    if key in SCALED_KEYS and game_size != universe.numbers_drawn:
        ratio = game_size / universe.numbers_drawn
        lo = math.floor(lo * ratio) if lo is not None else None
        hi = math.ceil(hi * ratio) if hi is not None else None
    return lo, hi


def _within(value: int, bounds: Bounds) -> bool:
    lo, hi = bounds
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True


def _neutral_value(bounds: Bounds) -> int:
    """A value that satisfies its own range."""
    lo, hi = bounds
    if lo is not None:
        return lo
    return hi if hi is not None else 0


def passes_filters(
    game: Game,
    active_filter_keys: Sequence[str],
    last_draw: Draw | None,
    universe: UniverseConfig,
) -> bool:
    if not active_filter_keys:
        return True

    stats = compute_stats(game, universe)
    for key in active_filter_keys:
        bounds = criterion_bounds(key, game.size, universe)
        if bounds is None:
            log.debug(f"Filter '{key}' has no range for {universe.name}, ignored")
            continue

        if key == REPEATED_FROM_LAST:
            if last_draw is None:
                value = _neutral_value(bounds)
            else:
                value = game.hits(last_draw.numbers)
        elif key in _VALUE_OF:
            value = _VALUE_OF[key](stats)
        else:
            log.debug(f"Unknown filter key '{key}', ignored")
            continue

        if not _within(value, bounds):
            return False
    return True


def filter_games(
    games: Iterable[Game],
    active_filter_keys: Sequence[str],
    last_draw: Draw | None,
    universe: UniverseConfig,
) -> list[Game]:
    games = list(games)
    if REPEATED_FROM_LAST in active_filter_keys and last_draw is None:
        log.warning("No previous draw available — 'repeatedFromLast' uses a neutral value.")
    kept = [g for g in games if passes_filters(g, active_filter_keys, last_draw, universe)]
    log.info(f"Filters {list(active_filter_keys)}: {len(kept)}/{len(games)} games kept")
    return kept


# ── Range suggestions from recent draws ───────────────────────────
SUGGESTION_KEYS = ("evenCount", "sum", "frameCount")
MIN_SUGGESTION_DRAWS = 10
MAX_SUGGESTION_DRAWS = 500


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _summarize(values: list[int]) -> dict[str, int]:
    """10th/90th percentile as min/max so a few outliers do not widen the range."""
    ordered = sorted(values)
    counts = Counter(values)
    return {
        "min": ordered[math.floor(len(ordered) * 0.10)],
        "max": ordered[math.floor(len(ordered) * 0.90)],
        "average": _round_half_up(sum(values) / len(values)),
        # ties go to the smallest value
        "most_common": min(counts, key=lambda v: (-counts[v], v)),
    }


def suggest_filter_ranges(
    draws: Sequence[Draw],
    universe: UniverseConfig,
    last_n: int = 100,
) -> dict:
    """
    Observed evenCount / sum / frameCount over the ``last_n`` most recent draws,
    as {"draws_analyzed": n, key: {"min", "max", "average", "most_common"}}.
    """
    if not MIN_SUGGESTION_DRAWS <= last_n <= MAX_SUGGESTION_DRAWS:
        raise InvalidInput(
            f"last_n must be within [{MIN_SUGGESTION_DRAWS},{MAX_SUGGESTION_DRAWS}], got {last_n}", last_n
        )
    recent = sorted(draws, key=lambda d: d.sequence_number, reverse=True)[:last_n]
    if not recent:
        raise EmptyHistory("filter range suggestions")

    values: dict[str, list[int]] = {key: [] for key in SUGGESTION_KEYS}
    for draw in recent:
        stats = compute_stats(draw.numbers, universe)
        for key in SUGGESTION_KEYS:
            values[key].append(_VALUE_OF[key](stats))

    suggestions: dict = {"draws_analyzed": len(recent)}
    suggestions.update({key: _summarize(vals) for key, vals in values.items()})
    log.info(
        f"Suggested ranges from {len(recent)} draws: "
        + ", ".join(f"{k} [{suggestions[k]['min']},{suggestions[k]['max']}]" for k in SUGGESTION_KEYS)
    )
    return suggestions
