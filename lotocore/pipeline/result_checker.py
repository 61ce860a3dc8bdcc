"""
lotocore/pipeline/result_checker.py
Check a player's games: against one draw (hits and prize tier) and against the
whole history (already drawn? quality score, repeats from the latest draw).
"""
from __future__ import annotations

from typing import Iterable, Sequence

from lotocore.models.game import Draw, Game, UniverseConfig
from lotocore.scoring.quality_score import score_game, with_repeated_count
from lotocore.utils.draw_source import DrawSource
from lotocore.utils.logger import get_logger

log = get_logger("pipeline.checker")

NO_PRIZE = "NO_PRIZE"


def prize_tier(hits: int, universe: UniverseConfig) -> str:
    return universe.prize_tiers.get(hits, NO_PRIZE)


def check_against_draw(games: Iterable[Game], draw: Draw, universe: UniverseConfig) -> list[dict]:
    """Hits and prize tier of every game for a single draw."""
    results = []
    for game in games:
        matched = sorted(game.number_set & draw.number_set)
        results.append({
            "numbers": game.numbers,
            "matched_numbers": matched,
            "matched_count": len(matched),
            "prize_level": prize_tier(len(matched), universe),
        })
    winners = sum(1 for r in results if r["prize_level"] != NO_PRIZE)
    log.info(f"[CHECK] draw {draw.sequence_number}: {winners}/{len(results)} games with a prize")
    return results


def check_games(games: Sequence[Game], source: DrawSource, universe: UniverseConfig) -> dict:
    """
    Full flow:
    1. Load all draws
    2. Index past results for exact-match lookup
    3. Score each game (0 if it was already drawn) and count repeats from the latest draw
    """
    draws = source.list_draws(order_by="asc")
    by_numbers = {d.number_set: d for d in draws}
    latest = draws[-1] if draws else None

    results = []
    for game in games:
        quality = score_game(game, universe, winning_combinations=by_numbers.keys())
        quality = with_repeated_count(quality, game, latest)
        matched = by_numbers.get(game.number_set)
        results.append({
            "numbers": game.numbers,
            "quality": quality,
            "is_drawn": matched is not None,
            "matched_sequence": matched.sequence_number if matched else None,
            "matched_date": matched.draw_date if matched else None,
        })

    found = sum(1 for r in results if r["is_drawn"])
    log.info(f"[CHECK] {len(results)} games against {len(draws)} draws, {found} already drawn")
    return {
        "success": True,
        "total_checked": len(results),
        "found_count": found,
        "latest_sequence": latest.sequence_number if latest else None,
        "results": results,
    }
