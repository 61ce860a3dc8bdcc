"""
lotocore/scoring/quality_score.py
Deduction-based quality score: start at 100, subtract a fixed penalty for every
rule the game breaks, floor at 0.

Ratio rules are expressed relative to the universe: the accepted share of frame,
prime and fibonacci numbers is a multiple of that set's density in 1..N, so the
same rule table works for a 6/60 and a 15/25 game.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from lotocore.models.game import Draw, Game, UniverseConfig
from lotocore.models.statistical.derived_stats import DerivedStats, compute_stats

BASE_SCORE = 100
HISTORICAL_WINNER_VIOLATION = "Game already drawn in a past contest"


@dataclass(frozen=True)
class QualityResult:
    score: int
    metrics: DerivedStats
    violations: tuple[str, ...]
    repeated_count: int | None = None


@dataclass(frozen=True)
class ScoringRule:
    name: str
    penalty: int
    # returns a violation message, or None when the game is inside the range
    check: Callable[[DerivedStats, UniverseConfig], str | None]


def _ratio_range(size: int, lo_pct: float, hi_pct: float) -> tuple[int, int]:
    return math.floor(size * lo_pct), math.ceil(size * hi_pct)


def _density(subset: frozenset[int], universe: UniverseConfig) -> float:
    return len(subset) / universe.total_numbers


def _check_sequence(s: DerivedStats, u: UniverseConfig) -> str | None:
    max_acceptable = max(2, min(s.size - 2, 5))
    if s.longest_run >= max_acceptable:
        return f"Sequence too long ({s.longest_run} numbers)"
    return None


def _check_parity(s: DerivedStats, u: UniverseConfig) -> str | None:
    lo, hi = _ratio_range(s.size, 0.30, 0.70)
    if not lo <= s.even_count <= hi:
        return f"Even/odd imbalance ({s.even_count} even of {s.size}, ideal: {lo}-{hi})"
    return None


def _check_sum(s: DerivedStats, u: UniverseConfig) -> str | None:
    lo = math.floor(s.size * u.average_number * 0.50)
    hi = math.ceil(s.size * u.average_number * 1.30)
    if not lo <= s.sum <= hi:
        return f"Sum out of range ({s.sum}, ideal: {lo}-{hi} for {s.size} numbers)"
    return None


def _check_frame(s: DerivedStats, u: UniverseConfig) -> str | None:
    d = _density(u.frame_numbers, u)
    lo, hi = _ratio_range(s.size, d * 0.43, d * 1.18)
    if not lo <= s.frame_count <= hi:
        return f"Frame count out of range ({s.frame_count} of {s.size}, ideal: {lo}-{hi})"
    return None


def _check_primes(s: DerivedStats, u: UniverseConfig) -> str | None:
    d = _density(u.prime_numbers, u)
    lo, hi = _ratio_range(s.size, d * 0.53, d * 1.59)
    if not lo <= s.prime_count <= hi:
        return f"Prime count out of range ({s.prime_count} of {s.size}, ideal: {lo}-{hi})"
    return None


def _check_fibonacci(s: DerivedStats, u: UniverseConfig) -> str | None:
    hi = math.ceil(s.size * _density(u.fibonacci_numbers, u) * 2.0)
    if s.fibonacci_count > hi:
        return f"Too many Fibonacci numbers ({s.fibonacci_count} of {s.size}, max: {hi})"
    return None


def _check_rows(s: DerivedStats, u: UniverseConfig) -> str | None:
    cap = u.max_per_row if u.max_per_row is not None else max(3, math.ceil(1.3 * s.size / u.n_rows))
    max_per_row = min(s.size, cap)
    if any(c > max_per_row for c in s.row_counts):
        return "Unbalanced row distribution"
    return None


def _check_columns(s: DerivedStats, u: UniverseConfig) -> str | None:
    cap = u.max_per_column if u.max_per_column is not None else max(2, math.ceil(1.3 * s.size / u.row_size))
    max_per_column = min(s.size, cap)
    if sum(1 for c in s.column_counts if c > max_per_column) >= 2:
        return "Unbalanced column/ending distribution"
    return None


def _check_amplitude(s: DerivedStats, u: UniverseConfig) -> str | None:
    min_amplitude = math.floor(u.total_numbers * 0.35)
    if s.amplitude < min_amplitude:
        return f"Amplitude too low ({s.amplitude}, ideal: >{min_amplitude})"
    return None


RULES: tuple[ScoringRule, ...] = (
    ScoringRule("sequence", 25, _check_sequence),
    ScoringRule("parity", 20, _check_parity),
    ScoringRule("sum", 20, _check_sum),
    ScoringRule("frame", 15, _check_frame),
    ScoringRule("prime", 12, _check_primes),
    ScoringRule("fibonacci", 8, _check_fibonacci),
    ScoringRule("rows", 8, _check_rows),
    ScoringRule("columns", 8, _check_columns),
    ScoringRule("amplitude", 10, _check_amplitude),
)


def _as_combination_set(winning: Iterable[Draw | Iterable[int]]) -> set[frozenset[int]]:
    return {
        w.number_set if isinstance(w, Draw) else frozenset(w)
        for w in winning
    }


def score_game(
    game: Game,
    universe: UniverseConfig,
    winning_combinations: Iterable[Draw | Iterable[int]] | None = None,
) -> QualityResult:
    """
    Score one game. ``winning_combinations`` is the optional list of past results;
    a game identical to one of them scores 0 whatever its other stats.
    """
    stats = compute_stats(game, universe)
    score = BASE_SCORE
    violations: list[str] = []

    for rule in RULES:
        message = rule.check(stats, universe)
        if message is not None:
            score -= rule.penalty
            violations.append(message)

    if winning_combinations is not None and game.number_set in _as_combination_set(winning_combinations):
        score = 0
        violations.append(HISTORICAL_WINNER_VIOLATION)

    return QualityResult(score=max(0, score), metrics=stats, violations=tuple(violations))


def with_repeated_count(result: QualityResult, game: Game, last_draw: Draw | None) -> QualityResult:
    """Attach how many numbers the game shares with the latest draw (display only)."""
    if last_draw is None:
        return result
    return replace(result, repeated_count=game.hits(last_draw.numbers))
