"""tests/test_closing.py"""
from datetime import date
from itertools import combinations as subsets

import pytest

from lotocore.closing.simulator import hit_matrix, simulate
from lotocore.closing.strategies import closing_statistics, generate_closing, theoretical_estimate
from lotocore.closing.templates import get_wheel_template, list_wheel_templates
from lotocore.closing.wheel_engine import (
    Wheel,
    exhaustive_closing,
    filter_closing,
    templated_closing,
)
from lotocore.models.game import Draw, Game
from lotocore.models.statistical.derived_stats import compute_stats
from lotocore.utils.config import get_universe_config
from lotocore.utils.errors import (
    CombinatorialLimitExceeded,
    EmptyHistory,
    InsufficientPool,
    InvalidInput,
    TemplateMismatch,
)

MEGA = get_universe_config("megasena")
LOTO = get_universe_config("lotofacil")

POOL_18 = list(range(1, 19))
POOL_8 = [3, 9, 14, 22, 31, 40, 47, 58]


class TestExhaustiveClosing:
    def test_every_subset_once(self):
        wheel = exhaustive_closing(POOL_8, 6, MEGA)
        assert len(wheel) == 28
        assert len({g.numbers for g in wheel.games}) == 28
        assert wheel.guarantee.hits == 6

    def test_pool_smaller_than_game(self):
        with pytest.raises(InsufficientPool):
            exhaustive_closing([1, 2, 3, 4, 5], 6, MEGA)

    def test_game_size_outside_universe(self):
        with pytest.raises(InvalidInput):
            exhaustive_closing(POOL_8, 5, MEGA)

    def test_ceiling_refused_before_enumeration(self):
        with pytest.raises(CombinatorialLimitExceeded) as exc:
            exhaustive_closing(list(range(1, 21)), 10, MEGA, max_games=1000)
        assert exc.value.count == 184_756

    def test_duplicate_pool_rejected(self):
        with pytest.raises(InvalidInput):
            exhaustive_closing([1, 1, 2, 3, 4, 5, 6], 6, MEGA)

    def test_filtering_keeps_metadata(self):
        wheel = exhaustive_closing(list(range(1, 9)), 6, MEGA)
        filtered = filter_closing(wheel, ["evenCount"], None, MEGA)
        assert 0 < len(filtered) <= len(wheel)
        assert filtered.pool == wheel.pool
        assert filtered.guarantee == wheel.guarantee
        assert all(2 <= compute_stats(g, MEGA).even_count <= 4 for g in filtered.games)


class TestTemplates:
    def test_known_templates(self):
        names = list_wheel_templates()
        assert "18-15-14-15" in names
        assert "8-6-5-6" in names

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            get_wheel_template("99-1-1-1")

    def test_18_15_14_15_shape(self):
        template = get_wheel_template("18-15-14-15")
        wheel = templated_closing(POOL_18, template, LOTO)
        assert len(wheel) == 24
        assert all(g.size == 15 for g in wheel.games)
        assert wheel.template_name == "18-15-14-15"
        assert wheel.guarantee.hits == 14

    def test_18_15_14_15_covers_every_outcome(self):
        wheel = templated_closing(POOL_18, get_wheel_template("18-15-14-15"), LOTO)
        game_sets = [g.number_set for g in wheel.games]
        for drawn in subsets(POOL_18, 15):
            assert max(len(s.intersection(drawn)) for s in game_sets) >= 14, drawn

    def test_pool_order_drives_mapping(self):
        template = get_wheel_template("18-15-14-15")
        pool = list(range(25, 7, -1))
        wheel = templated_closing(pool, template, LOTO)
        expected = tuple(sorted(pool[i] for i in template.index_tuples[0]))
        assert wheel.games[0].numbers == expected

    def test_wrong_pool_size(self):
        with pytest.raises(TemplateMismatch) as exc:
            templated_closing(POOL_18[:17], get_wheel_template("18-15-14-15"), LOTO)
        assert exc.value.expected == 18
        assert exc.value.actual == 17

    def test_8_6_5_6_guarantee(self):
        wheel = templated_closing(POOL_8, get_wheel_template("8-6-5-6"), MEGA)
        assert len(wheel) == 4
        for drawn in subsets(POOL_8, 6):
            assert max(g.hits(drawn) for g in wheel.games) >= 5


class TestStrategies:
    def test_respects_max_games(self):
        for strategy in ("balanced", "coverage", "optimized"):
            wheel = generate_closing(list(range(1, 21)), strategy, MEGA, max_games=3)
            assert 1 <= len(wheel) <= 3
            assert wheel.strategy == strategy

    def test_fixed_numbers_in_every_game(self):
        for strategy in ("balanced", "coverage", "optimized"):
            wheel = generate_closing(
                list(range(1, 16)), strategy, MEGA, max_games=10, fixed_numbers=[7, 12]
            )
            assert all({7, 12} <= g.number_set for g in wheel.games)
            assert all(g.size == 6 for g in wheel.games)

    def test_deterministic(self):
        a = generate_closing(list(range(1, 21)), "optimized", MEGA, max_games=8)
        b = generate_closing(list(range(1, 21)), "optimized", MEGA, max_games=8)
        assert [g.numbers for g in a.games] == [g.numbers for g in b.games]

    def test_balanced_uses_whole_pool(self):
        wheel = generate_closing(list(range(1, 21)), "balanced", MEGA, max_games=50)
        assert len(wheel) == 4
        assert closing_statistics(wheel, MEGA)["coverage"] == 100.0

    def test_greedy_uses_whole_pool(self):
        wheel = generate_closing(list(range(1, 11)), "coverage", MEGA, max_games=100)
        assert closing_statistics(wheel, MEGA)["coverage"] == 100.0

    def test_only_fixed_numbers(self):
        wheel = generate_closing(list(range(1, 10)), "balanced", MEGA, fixed_numbers=[1, 2, 3, 4, 5, 6])
        assert [g.numbers for g in wheel.games] == [(1, 2, 3, 4, 5, 6)]

    def test_invalid_requests(self):
        with pytest.raises(InvalidInput):
            generate_closing(POOL_8, "random", MEGA)
        with pytest.raises(InvalidInput):
            generate_closing(POOL_8, "balanced", MEGA, max_games=0)
        with pytest.raises(InvalidInput):
            generate_closing(POOL_8, "balanced", MEGA, fixed_numbers=[1, 2, 3, 4, 5, 6, 7])
        with pytest.raises(InsufficientPool):
            generate_closing([1, 2, 3, 4, 5], "coverage", MEGA)


class TestClosingStatistics:
    def test_exhaustive_costs(self):
        wheel = exhaustive_closing(list(range(1, 8)), 6, MEGA)
        stats = closing_statistics(wheel, MEGA)
        assert stats["total_games"] == 7
        assert stats["game_sizes"] == [6]
        assert stats["cost_per_game"] == 5.0
        assert stats["total_cost"] == 35.0
        assert stats["pair_coverage"] == 100.0
        assert stats["guaranteed_hits"] == 6

    def test_theoretical_estimate(self):
        estimate = theoretical_estimate(18, 15, 14, LOTO)
        assert estimate["min_games_theoretical"] == 2
        assert estimate["recommended_games"] == 4
        assert estimate["estimated_cost"] == 12.0


class TestSimulator:
    def setup_method(self):
        self.draw = Draw.create(100, date(2024, 1, 6), [4, 17, 23, 31, 45, 58], MEGA)

    def test_identical_game(self):
        wheel = Wheel(pool=self.draw.numbers, games=(Game(self.draw.numbers),))
        result = simulate(wheel, [self.draw], guaranteed_hits=6)
        row = result.per_draw[0]
        assert row.best_hits == row.worst_hits == 6
        assert row.average_hits == 6.0
        assert row.guarantee_achieved
        assert result.summary.success_rate == 1.0
        assert result.summary.histogram == {6: 1}

    def test_best_and_worst(self):
        games = (Game((4, 17, 23, 1, 2, 3)), Game((5, 6, 7, 8, 9, 10)))
        wheel = Wheel(pool=tuple(range(1, 24)), games=games)
        result = simulate(wheel, [self.draw], guaranteed_hits=4)
        row = result.per_draw[0]
        assert row.best_hits == 3
        assert row.worst_hits == 0
        assert row.average_hits == 1.5
        assert not row.guarantee_achieved
        assert result.summary.success_rate == 0.0

    def test_hit_matrix_shape(self):
        matrix = hit_matrix([(4, 17), (1, 2), (23, 31, 45)], [self.draw])
        assert matrix.shape == (1, 3)
        assert list(matrix[0]) == [2, 0, 3]

    def test_empty_wheel(self):
        with pytest.raises(InvalidInput):
            simulate(Wheel(pool=(1, 2), games=()), [self.draw], 3)

    def test_no_draws(self):
        wheel = Wheel(pool=self.draw.numbers, games=(Game(self.draw.numbers),))
        with pytest.raises(EmptyHistory):
            simulate(wheel, [], 3)

    def test_template_guarantee_over_history(self):
        wheel = templated_closing(POOL_18, get_wheel_template("18-15-14-15"), LOTO)
        draws = [
            Draw.create(i, None, drawn, LOTO)
            for i, drawn in enumerate(list(subsets(POOL_18, 15))[::37], start=1)
        ]
        result = simulate(wheel, draws, guaranteed_hits=14)
        assert result.summary.draws_tested == len(draws)
        assert result.summary.success_rate == 1.0
        assert result.summary.avg_best >= 14
