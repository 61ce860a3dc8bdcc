"""
lotocore/models/statistical/cycle_analyzer.py
Per-number gap / urgency statistics and global cycle progress.

A number's gap is the count of draws since it last appeared. Numbers whose
current gap is large relative to their own average gap are "overdue" and rank
higher. A cycle is the shortest run of draws in which every number 1..N
appears at least once.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lotocore.models.game import Draw, UniverseConfig
from lotocore.models.statistical.frequency_analyzer import FrequencyAnalyzer, appearance_matrix
from lotocore.utils.errors import EmptyHistory
from lotocore.utils.logger import get_logger

log = get_logger("model.cycle")

URGENCY_WEIGHT = 0.6
FREQUENCY_WEIGHT = 0.4
SOON_WINDOW = 5


@dataclass(frozen=True)
class CycleStat:
    number: int
    last_seen_index: int | None       # index into the chronological history
    gap: int                          # 0 when drawn in the latest draw
    historical_average_gap: float
    urgency: float                    # gap / historical_average_gap
    historical_gaps: tuple[int, ...]
    gap_std: float
    overdue_z: float                  # max(0, (gap - mean) / std)
    prob_within_5: float              # empirical chance of reappearing within 5 draws
    frequency: float
    frequency_z: float
    weighted_score: float


@dataclass(frozen=True)
class CycleProgress:
    cycle_start_index: int
    cycle_start_sequence: int | None  # None when the open cycle has no draws yet
    numbers_seen: frozenset[int]
    numbers_remaining: frozenset[int]
    cycles_completed: int
    cycle_lengths: tuple[int, ...]
    draws_elapsed: int
    longest_cycle: int
    shortest_cycle: int
    average_cycle_length: float


def chronological(draws: Sequence[Draw]) -> list[Draw]:
    return sorted(draws, key=lambda d: d.sequence_number)


class CycleAnalyzer:
    """Gap, urgency and cycle analysis over the full draw history."""

    def __init__(self, universe: UniverseConfig):
        self.universe = universe
        self.freq_analyzer = FrequencyAnalyzer(universe)

    def cycle_stats(self, draws: Sequence[Draw]) -> list[CycleStat]:
        """
        One CycleStat per number, sorted by descending urgency
        (ties broken by ascending number).
        """
        if not draws:
            raise EmptyHistory("cycle statistics")

        history = chronological(draws)
        total = len(history)
        matrix = appearance_matrix(history, self.universe)
        freq_z = self.freq_analyzer.get_z_scores(history)

        stats: list[CycleStat] = []
        for num in self.universe.numbers:
            seen_at = np.flatnonzero(matrix[:, num])
            gaps = np.diff(seen_at)

            if seen_at.size:
                last_seen: int | None = int(seen_at[-1])
                gap = total - 1 - last_seen
            else:
                last_seen = None
                gap = total

            # Fewer than two appearances: no interval to average, use the history length
            avg_gap = float(gaps.mean()) if gaps.size else float(total)
            gap_std = float(gaps.std(ddof=1)) if gaps.size > 1 else 0.0
            overdue_z = max(0.0, (gap - avg_gap) / gap_std) if gap_std else 0.0

            at_least_current = gaps[gaps >= gap]
            prob_soon = (
                float(np.count_nonzero(at_least_current <= gap + SOON_WINDOW)) / at_least_current.size
                if at_least_current.size else 0.0
            )

            urgency = gap / avg_gap
            stats.append(CycleStat(
                number=num,
                last_seen_index=last_seen,
                gap=gap,
                historical_average_gap=avg_gap,
                urgency=urgency,
                historical_gaps=tuple(int(g) for g in gaps),
                gap_std=gap_std,
                overdue_z=overdue_z,
                prob_within_5=prob_soon,
                frequency=seen_at.size / total,
                frequency_z=freq_z[num],
                weighted_score=URGENCY_WEIGHT * urgency + FREQUENCY_WEIGHT * freq_z[num],
            ))

        stats.sort(key=lambda s: (-s.urgency, s.number))
        log.info(
            f"Cycle stats over {total} draws — most urgent: "
            f"{[s.number for s in stats[:5]]}"
        )
        return stats

    def full_cycle_analysis(self, draws: Sequence[Draw]) -> CycleProgress:
        """Replay the history and close a cycle each time all N numbers have appeared."""
        if not draws:
            raise EmptyHistory("cycle analysis")

        history = chronological(draws)
        everything = frozenset(self.universe.numbers)
        lengths: list[int] = []
        seen: set[int] = set()
        start = 0

        for idx, draw in enumerate(history):
            seen.update(draw.numbers)
            if everything <= seen:
                lengths.append(idx - start + 1)
                seen.clear()
                start = idx + 1

        progress = CycleProgress(
            cycle_start_index=start,
            cycle_start_sequence=history[start].sequence_number if start < len(history) else None,
            numbers_seen=frozenset(seen & everything),
            numbers_remaining=everything - seen,
            cycles_completed=len(lengths),
            cycle_lengths=tuple(lengths),
            draws_elapsed=len(history) - start,
            longest_cycle=max(lengths, default=0),
            shortest_cycle=min(lengths, default=0),
            average_cycle_length=sum(lengths) / len(lengths) if lengths else 0.0,
        )
        log.info(
            f"{progress.cycles_completed} cycles completed; open cycle: "
            f"{progress.draws_elapsed} draws, {len(progress.numbers_remaining)} numbers missing"
        )
        return progress

    @staticmethod
    def ranking(stats: Sequence[CycleStat], use_weighted_score: bool = False) -> list[int]:
        """Numbers ordered by urgency (or weighted score), most overdue first."""
        if use_weighted_score:
            return [s.number for s in sorted(stats, key=lambda s: (-s.weighted_score, s.number))]
        return [s.number for s in sorted(stats, key=lambda s: (-s.urgency, s.number))]
