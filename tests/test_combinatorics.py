"""tests/test_combinatorics.py"""
import math
import threading

import pytest

from lotocore.combinatorics.combination_generator import (
    check_ceiling,
    combinations,
    count_combinations,
    iter_combinations,
)
from lotocore.utils.errors import CombinatorialLimitExceeded, GenerationCancelled, InvalidInput


class TestCountCombinations:
    def test_known_values(self):
        assert count_combinations(18, 15) == 816
        assert count_combinations(60, 6) == 50_063_860
        assert count_combinations(5, 0) == 1

    def test_k_greater_than_n_is_zero(self):
        assert count_combinations(3, 5) == 0

    def test_negative_rejected(self):
        with pytest.raises(InvalidInput):
            count_combinations(-1, 2)

    def test_ceiling(self):
        assert check_ceiling(10, 3, 120) == 120
        with pytest.raises(CombinatorialLimitExceeded) as exc:
            check_ceiling(10, 3, 119)
        assert exc.value.count == 120
        assert exc.value.ceiling == 119


class TestCombinations:
    def test_count_and_distinct(self):
        items = list(range(1, 11))
        result = combinations(items, 4)
        assert len(result) == math.comb(10, 4)
        assert len(set(result)) == len(result)
        assert all(len(c) == 4 for c in result)

    def test_lexicographic_order(self):
        assert combinations([1, 2, 3, 4], 2) == [
            (1, 2), (1, 3), (1, 4), (2, 3), (2, 4), (3, 4),
        ]

    def test_k_zero_yields_empty_tuple(self):
        assert combinations([1, 2, 3], 0) == [()]

    def test_k_greater_than_n_yields_nothing(self):
        assert combinations([1, 2], 3) == []

    def test_full_set(self):
        assert combinations([7, 8, 9], 3) == [(7, 8, 9)]

    def test_over_ceiling_generates_nothing(self):
        seen = []

        class Recorder(list):
            def __getitem__(self, i):
                seen.append(i)
                return super().__getitem__(i)

        with pytest.raises(CombinatorialLimitExceeded):
            combinations(Recorder(range(20)), 10, max_results=1000)
        assert seen == []

    def test_negative_k_rejected(self):
        with pytest.raises(InvalidInput):
            combinations([1, 2, 3], -1)


class TestCancellation:
    def test_preset_signal_stops_before_output(self):
        stop = threading.Event()
        stop.set()
        with pytest.raises(GenerationCancelled):
            combinations(list(range(12)), 6, cancel=stop)

    def test_signal_mid_enumeration(self):
        stop = threading.Event()
        produced = []
        with pytest.raises(GenerationCancelled):
            for combo in iter_combinations(list(range(12)), 3, cancel=stop):
                produced.append(combo)
                if combo[0] == 1:
                    stop.set()
        # Stops at the next top-level branch
        assert produced
        assert all(c[0] <= 1 for c in produced)

    def test_unset_signal_has_no_effect(self):
        stop = threading.Event()
        assert len(combinations(list(range(8)), 4, cancel=stop)) == 70
