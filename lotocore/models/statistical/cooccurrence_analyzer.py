"""
lotocore/models/statistical/cooccurrence_analyzer.py
Pair co-occurrence counts and phi correlation between numbers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from lotocore.models.game import Draw, UniverseConfig
from lotocore.models.statistical.frequency_analyzer import appearance_matrix
from lotocore.utils.errors import EmptyHistory


@dataclass(frozen=True)
class CooccurrenceStats:
    matrix: np.ndarray         # (N+1, N+1), [i, j] = draws containing both i and j
    correlations: np.ndarray   # (N+1, N+1) phi coefficients, diagonal = 1
    frequency: np.ndarray      # (N+1,) appearances per number
    total_draws: int


class CooccurrenceAnalyzer:
    def __init__(self, universe: UniverseConfig):
        self.universe = universe

    def get_stats(self, draws: Sequence[Draw]) -> CooccurrenceStats:
        if not draws:
            raise EmptyHistory("co-occurrence analysis")

        x = appearance_matrix(draws, self.universe).astype(np.int64)
        x[:, 0] = 0
        total = len(draws)
        together = x.T @ x
        freq = np.diag(together).copy()
        np.fill_diagonal(together, 0)

        # phi = (n11*n00 - n10*n01) / sqrt(n1. * n0. * n.1 * n.0)
        fi = freq[:, None].astype(float)
        fj = freq[None, :].astype(float)
        n11 = together.astype(float)
        n10 = fi - n11
        n01 = fj - n11
        n00 = total - fi - fj + n11
        denominator = np.sqrt(fi * (total - fi) * fj * (total - fj))
        with np.errstate(divide="ignore", invalid="ignore"):
            phi = np.where(denominator > 0, (n11 * n00 - n10 * n01) / denominator, 0.0)
        np.fill_diagonal(phi, 1.0)

        return CooccurrenceStats(matrix=together, correlations=phi, frequency=freq, total_draws=total)

    def top_pairs(self, draws: Sequence[Draw], top_n: int = 20) -> list[tuple[int, int, int]]:
        """Most frequent pairs as (a, b, count), a < b; ties by ascending pair."""
        stats = self.get_stats(draws)
        pairs = [
            (a, b, int(stats.matrix[a, b]))
            for a in self.universe.numbers
            for b in range(a + 1, self.universe.total_numbers + 1)
            if stats.matrix[a, b]
        ]
        pairs.sort(key=lambda p: (-p[2], p[0], p[1]))
        return pairs[:top_n]
