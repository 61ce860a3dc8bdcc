"""
lotocore/models/statistical/frequency_analyzer.py
Hot/cold number scoring and frequency z-scores over the draw history.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from lotocore.models.game import Draw, UniverseConfig


def appearance_matrix(draws: Sequence[Draw], universe: UniverseConfig) -> np.ndarray:
    """
    Boolean matrix of shape (len(draws), N + 1); column n is True when number n
    was drawn. Column 0 is unused so numbers index directly.
    """
    matrix = np.zeros((len(draws), universe.total_numbers + 1), dtype=bool)
    for row, draw in enumerate(draws):
        matrix[row, list(draw.numbers)] = True
    return matrix


class FrequencyAnalyzer:
    """Score each number by how often it appears, overall and in recent draws."""

    def __init__(self, universe: UniverseConfig, window: int = 100, weight_recency: float = 0.6):
        self.universe = universe
        self.window = window
        self.weight_recency = weight_recency  # recency decay factor

    def get_frequencies(self, draws: Sequence[Draw]) -> dict[int, float]:
        """Relative frequency (appearances / draws) over the full history."""
        if not draws:
            return {n: 0.0 for n in self.universe.numbers}
        counts = appearance_matrix(draws, self.universe).sum(axis=0)
        total = len(draws)
        return {n: float(counts[n]) / total for n in self.universe.numbers}

    def get_z_scores(self, draws: Sequence[Draw]) -> dict[int, float]:
        """Population z-score of each number's frequency; 0 when all are equal."""
        freqs = self.get_frequencies(draws)
        values = np.array([freqs[n] for n in self.universe.numbers], dtype=float)
        sd = values.std()
        if sd == 0:
            return {n: 0.0 for n in self.universe.numbers}
        mean = values.mean()
        return {n: float((freqs[n] - mean) / sd) for n in self.universe.numbers}

    def get_scores(self, draws: Sequence[Draw]) -> dict[int, float]:
        """
        Returns a score dict {number: score} for all numbers in range.
        Higher score = more frequent recently (hot).
        """
        recent = sorted(draws, key=lambda d: d.sequence_number, reverse=True)[: self.window]
        if not recent:
            return {n: 1.0 for n in self.universe.numbers}

        scores: dict[int, float] = {n: 0.0 for n in self.universe.numbers}
        for draw_idx, draw in enumerate(recent):
            # More recent draws get higher weight
            recency_weight = self.weight_recency ** draw_idx
            for num in draw.numbers:
                scores[num] += recency_weight

        # Normalize to [0, 1]
        max_score = max(scores.values()) or 1.0
        return {n: v / max_score for n, v in scores.items()}

    def get_hot_numbers(self, draws: Sequence[Draw], top_n: int = 15) -> list[int]:
        scores = self.get_scores(draws)
        return sorted(scores, key=lambda n: (-scores[n], n))[:top_n]

    def get_cold_numbers(self, draws: Sequence[Draw], bottom_n: int = 15) -> list[int]:
        scores = self.get_scores(draws)
        return sorted(scores, key=lambda n: (scores[n], n))[:bottom_n]
