"""
scripts/02_generate_cycle_games.py
Rank numbers by cycle urgency and generate filtered, scored games.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lotocore.models.statistical.cycle_analyzer import CycleAnalyzer
from lotocore.pipeline.game_generator import generate_cycle_games
from lotocore.scoring.filter_engine import FILTER_KEYS
from lotocore.utils.config import DEFAULT_UNIVERSE, UNIVERSE_LABELS, get_universe_config
from lotocore.utils.draw_source import JsonlDrawSource, latest_draw
from lotocore.utils.errors import LotoCoreError
from lotocore.utils.logger import get_logger

log = get_logger("generate_cycle_games")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate games weighted by cycle urgency")
    parser.add_argument("history", type=Path, help="JSONL file with one draw per line")
    parser.add_argument("--universe", default=DEFAULT_UNIVERSE)
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--game-size", type=int, default=None)
    parser.add_argument("--top-n", type=int, default=20)
    parser.add_argument("--filters", default="", help=f"comma-separated, from {', '.join(FILTER_KEYS)}")
    parser.add_argument("--weighted", action="store_true", help="rank by urgency + frequency")
    parser.add_argument("--min-quality", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    universe = get_universe_config(args.universe)
    source = JsonlDrawSource(args.history, universe)
    analyzer = CycleAnalyzer(universe)

    try:
        draws = source.list_draws(order_by="asc")
        progress = analyzer.full_cycle_analysis(draws)
        stats = analyzer.cycle_stats(draws)
        games = generate_cycle_games(
            stats,
            universe,
            num_games=args.games,
            game_size=args.game_size,
            top_n=args.top_n,
            filter_keys=[k for k in args.filters.split(",") if k],
            last_draw=latest_draw(source),
            use_weighted_score=args.weighted,
            min_quality=args.min_quality,
            seed=args.seed,
        )
    except LotoCoreError as exc:
        log.error(str(exc))
        return 1

    log.info(f"{UNIVERSE_LABELS.get(universe.name, universe.name)} — {len(draws)} draws")
    log.info(
        f"Open cycle: {progress.draws_elapsed} draws, missing {sorted(progress.numbers_remaining)}"
    )
    for g in games:
        quality = f" | quality {g.quality}" if g.quality is not None else ""
        log.info(f"{' '.join(f'{n:02d}' for n in g.game.numbers)} | avg score {g.avg_score}{quality}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
