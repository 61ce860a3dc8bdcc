"""
scripts/01_simulate_closing.py
Build a closing from a pool and replay it against a JSONL draw history.

Example:
    python scripts/01_simulate_closing.py data/lotofacil.jsonl --universe lotofacil \
        --pool 1-18 --template 18-15-14-15 --hits 14 --last-n 100
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lotocore.closing.strategies import STRATEGIES
from lotocore.pipeline.closing_tester import run_closing_test
from lotocore.utils.config import DEFAULT_UNIVERSE, get_universe_config
from lotocore.utils.draw_source import JsonlDrawSource
from lotocore.utils.errors import LotoCoreError
from lotocore.utils.logger import get_logger

log = get_logger("simulate_closing")


def parse_pool(text: str) -> list[int]:
    """'1-18' or '1,4,9,...' → list of ints."""
    if "-" in text and "," not in text:
        lo, hi = text.split("-")
        return list(range(int(lo), int(hi) + 1))
    return [int(x) for x in text.split(",") if x.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate a closing against past draws")
    parser.add_argument("history", type=Path, help="JSONL file with one draw per line")
    parser.add_argument("--universe", default=DEFAULT_UNIVERSE)
    parser.add_argument("--pool", required=True, help="e.g. 1-18 or 2,5,7,...")
    parser.add_argument("--hits", type=int, required=True, help="guaranteed hits to test")
    parser.add_argument("--template", default=None)
    parser.add_argument("--strategy", choices=STRATEGIES, default="optimized")
    parser.add_argument("--fixed", default="", help="comma-separated fixed numbers")
    parser.add_argument("--game-size", type=int, default=None)
    parser.add_argument("--max-games", type=int, default=100)
    parser.add_argument("--last-n", type=int, default=None)
    args = parser.parse_args()

    universe = get_universe_config(args.universe)
    source = JsonlDrawSource(args.history, universe)
    try:
        wheel, stats, result = run_closing_test(
            source,
            parse_pool(args.pool),
            universe,
            guaranteed_hits=args.hits,
            strategy=args.strategy,
            template_name=args.template,
            fixed_numbers=parse_pool(args.fixed) if args.fixed else (),
            game_size=args.game_size,
            max_games=args.max_games,
            last_n=args.last_n,
        )
    except LotoCoreError as exc:
        log.error(str(exc))
        return 1

    log.info(f"\n{'='*60}\n{stats['total_games']} games — total cost {stats['total_cost']:.2f}\n{'='*60}")
    for game in wheel.games:
        log.info(" ".join(f"{n:02d}" for n in game.numbers))
    summary = result.summary
    log.info(
        f"Success rate {summary.success_rate:.1%} | avg best {summary.avg_best:.2f} | "
        f"avg worst {summary.avg_worst:.2f} | best-hit histogram {summary.histogram}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
