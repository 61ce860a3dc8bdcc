"""
lotocore/closing/simulator.py
Replay a closing against historical draws and measure how often its
guarantee was met.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

import numpy as np

from lotocore.closing.wheel_engine import Wheel
from lotocore.models.game import Draw
from lotocore.utils.errors import EmptyHistory, InvalidInput
from lotocore.utils.logger import get_logger

log = get_logger("closing.simulator")


@dataclass(frozen=True)
class DrawSimulation:
    sequence_number: int
    draw_date: date | None
    numbers: tuple[int, ...]
    best_hits: int
    worst_hits: int
    average_hits: float
    guarantee_achieved: bool


@dataclass(frozen=True)
class SimulationSummary:
    draws_tested: int
    success_rate: float             # fraction in [0, 1]
    avg_best: float
    avg_worst: float
    histogram: dict[int, int]       # best hits -> number of draws


@dataclass(frozen=True)
class SimulationResult:
    per_draw: tuple[DrawSimulation, ...]
    summary: SimulationSummary


def hit_matrix(games: Sequence[Sequence[int]], draws: Sequence[Draw]) -> np.ndarray:
    """(len(draws), len(games)) matrix of |game ∩ draw|."""
    top = max(
        max((max(g) for g in games if len(g)), default=0),
        max((max(d.numbers) for d in draws if d.numbers), default=0),
    )
    game_mask = np.zeros((len(games), top + 1), dtype=np.int32)
    for i, g in enumerate(games):
        game_mask[i, list(g)] = 1
    draw_mask = np.zeros((len(draws), top + 1), dtype=np.int32)
    for i, d in enumerate(draws):
        draw_mask[i, list(d.numbers)] = 1
    return draw_mask @ game_mask.T


def simulate(closing: Wheel, draws: Sequence[Draw], guaranteed_hits: int) -> SimulationResult:
    if not closing.games:
        raise InvalidInput("Cannot simulate a closing with no games", closing.pool)
    if not draws:
        raise EmptyHistory("closing simulation")

    hits = hit_matrix([g.numbers for g in closing.games], draws)
    best = hits.max(axis=1)
    worst = hits.min(axis=1)
    average = hits.mean(axis=1)
    achieved = best >= guaranteed_hits

    per_draw = tuple(
        DrawSimulation(
            sequence_number=d.sequence_number,
            draw_date=d.draw_date,
            numbers=d.numbers,
            best_hits=int(best[i]),
            worst_hits=int(worst[i]),
            average_hits=float(average[i]),
            guarantee_achieved=bool(achieved[i]),
        )
        for i, d in enumerate(draws)
    )

    values, counts = np.unique(best, return_counts=True)
    summary = SimulationSummary(
        draws_tested=len(draws),
        success_rate=float(achieved.mean()),
        avg_best=float(best.mean()),
        avg_worst=float(worst.mean()),
        histogram={int(v): int(c) for v, c in zip(values, counts)},
    )
    log.info(
        f"Simulated {len(closing.games)} games over {summary.draws_tested} draws: "
        f"guarantee {guaranteed_hits} met in {summary.success_rate:.1%}, avg best {summary.avg_best:.2f}"
    )
    return SimulationResult(per_draw=per_draw, summary=summary)
