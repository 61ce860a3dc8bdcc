"""tests/test_scoring.py"""
import pytest

from lotocore.models.game import Draw, Game
from lotocore.scoring.filter_engine import (
    FILTER_KEYS,
    criterion_bounds,
    filter_games,
    passes_filters,
    suggest_filter_ranges,
)
from lotocore.scoring.quality_score import (
    HISTORICAL_WINNER_VIOLATION,
    RULES,
    score_game,
    with_repeated_count,
)
from lotocore.utils.config import get_universe_config
from lotocore.utils.errors import EmptyHistory, InvalidInput

MEGA = get_universe_config("megasena")
LOTO = get_universe_config("lotofacil")

BALANCED = Game((4, 17, 23, 31, 45, 58))
FILTERED_OK = Game((4, 16, 23, 32, 45, 58))
LOW_RUN = Game((1, 2, 3, 4, 5, 6))


class TestQualityScore:
    def test_clean_game_scores_full(self):
        result = score_game(BALANCED, MEGA)
        assert result.score == 100
        assert result.violations == ()
        assert result.repeated_count is None

    def test_penalties_add_up(self):
        result = score_game(LOW_RUN, MEGA)
        # sequence 25, sum 20, frame 15, fibonacci 8, rows 8, amplitude 10
        assert result.score == 14
        assert len(result.violations) == 6
        assert result.violations[0].startswith("Sequence too long")

    def test_score_bounds(self):
        for game in (BALANCED, LOW_RUN, Game(tuple(range(1, 16))), Game(tuple(range(46, 61)))):
            assert 0 <= score_game(game, MEGA).score <= 100

    def test_historical_winner_scores_zero(self):
        past = [Draw.create(10, None, BALANCED.numbers, MEGA), (1, 2, 3, 4, 5, 7)]
        result = score_game(BALANCED, MEGA, winning_combinations=past)
        assert result.score == 0
        assert result.violations[-1] == HISTORICAL_WINNER_VIOLATION

    def test_not_a_winner(self):
        result = score_game(BALANCED, MEGA, winning_combinations=[(1, 2, 3, 4, 5, 7)])
        assert result.score == 100

    def test_rule_table(self):
        assert [r.penalty for r in RULES] == [25, 20, 20, 15, 12, 8, 8, 8, 10]

    def test_repeated_count(self):
        last = Draw.create(11, None, (4, 17, 20, 30, 40, 50), MEGA)
        result = with_repeated_count(score_game(BALANCED, MEGA), BALANCED, last)
        assert result.repeated_count == 2
        assert with_repeated_count(result, BALANCED, None) is result

    def test_out_of_range_game_rejected(self):
        with pytest.raises(InvalidInput):
            score_game(Game((1, 2, 3, 4, 5, 61)), MEGA)
        with pytest.raises(InvalidInput):
            score_game(Game((0, 12, 23, 34, 45, 56)), MEGA)

    def test_row_cap_from_universe(self):
        # four numbers on the first row of a 14-number Mega-Sena game
        game = Game((1, 3, 5, 7, 12, 24, 26, 33, 38, 41, 47, 52, 55, 59))
        result = score_game(game, MEGA)
        assert "Unbalanced row distribution" in result.violations

    def test_short_game_sequence_threshold(self):
        spread = score_game(Game((1, 3, 5)), MEGA)
        assert not any(v.startswith("Sequence too long") for v in spread.violations)
        paired = score_game(Game((1, 2, 4)), MEGA)
        assert paired.violations[0] == "Sequence too long (2 numbers)"

    def test_lotofacil_scoring_runs(self):
        game = Game.create([1, 2, 4, 5, 7, 8, 10, 11, 13, 14, 16, 18, 20, 22, 25], LOTO)
        result = score_game(game, LOTO)
        assert 0 <= result.score <= 100
        assert result.metrics.size == 15


class TestFilterEngine:
    def test_empty_filters_pass(self):
        assert passes_filters(LOW_RUN, [], None, MEGA)

    def test_passing_game(self):
        keys = [k for k in FILTER_KEYS if k != "repeatedFromLast"]
        assert passes_filters(FILTERED_OK, keys, None, MEGA)

    def test_failing_game(self):
        assert not passes_filters(LOW_RUN, ["longestSeq"], None, MEGA)
        assert not passes_filters(LOW_RUN, ["sum"], None, MEGA)

    def test_unknown_key_ignored(self):
        assert passes_filters(LOW_RUN, ["noSuchFilter"], None, MEGA)
        assert criterion_bounds("noSuchFilter", 6, MEGA) is None

    def test_repeated_without_last_draw_is_neutral(self):
        assert passes_filters(FILTERED_OK, ["repeatedFromLast"], None, MEGA)

    def test_repeated_from_last(self):
        same = Draw.create(5, None, FILTERED_OK.numbers, MEGA)
        assert not passes_filters(FILTERED_OK, ["repeatedFromLast"], same, MEGA)
        other = Draw.create(6, None, (4, 10, 20, 30, 40, 50), MEGA)
        assert passes_filters(FILTERED_OK, ["repeatedFromLast"], other, MEGA)

    def test_bounds_scale_with_game_size(self):
        assert criterion_bounds("evenCount", 6, MEGA) == (2, 4)
        assert criterion_bounds("evenCount", 12, MEGA) == (4, 8)
        assert criterion_bounds("evenCount", 18, LOTO) == (8, 10)
        # Absolute limits do not scale
        assert criterion_bounds("longestSeq", 12, MEGA) == (None, 2)

    def test_filter_games(self):
        kept = filter_games([FILTERED_OK, LOW_RUN], ["longestSeq", "sum"], None, MEGA)
        assert kept == [FILTERED_OK]

    def test_game_outside_universe_rejected(self):
        with pytest.raises(InvalidInput):
            passes_filters(BALANCED, ["sum"], None, LOTO)


# even 3, sum 87, frame 0
CENTER_DRAW = (12, 13, 14, 15, 16, 17)
# even 4, sum 178, frame 4 (1, 10, 51, 60)
CORNER_DRAW = (1, 10, 22, 34, 51, 60)
# even 6; older than any window of 10 below
EVEN_DRAW = (2, 4, 6, 8, 20, 40)


class TestFilterSuggestions:
    def setup_method(self):
        rows = [EVEN_DRAW] * 2 + [CENTER_DRAW] * 7 + [CORNER_DRAW] * 3
        self.draws = [Draw.create(i, None, nums, MEGA) for i, nums in enumerate(rows, start=1)]

    def test_ranges_from_latest_draws(self):
        result = suggest_filter_ranges(self.draws, MEGA, last_n=10)
        assert result["draws_analyzed"] == 10
        assert result["evenCount"] == {"min": 3, "max": 4, "average": 3, "most_common": 3}
        assert result["sum"] == {"min": 87, "max": 178, "average": 114, "most_common": 87}
        assert result["frameCount"] == {"min": 0, "max": 4, "average": 1, "most_common": 0}

    def test_input_order_irrelevant(self):
        forward = suggest_filter_ranges(self.draws, MEGA, last_n=10)
        assert suggest_filter_ranges(list(reversed(self.draws)), MEGA, last_n=10) == forward

    def test_short_history_uses_everything(self):
        result = suggest_filter_ranges(self.draws, MEGA, last_n=100)
        assert result["draws_analyzed"] == 12
        assert result["evenCount"]["max"] == 6
        assert result["evenCount"]["min"] == 3

    def test_most_common_tie_takes_smallest(self):
        draws = [
            Draw.create(i, None, CENTER_DRAW if i % 2 else CORNER_DRAW, MEGA) for i in range(1, 11)
        ]
        assert suggest_filter_ranges(draws, MEGA, last_n=10)["evenCount"]["most_common"] == 3

    def test_window_limits(self):
        with pytest.raises(InvalidInput):
            suggest_filter_ranges(self.draws, MEGA, last_n=5)
        with pytest.raises(InvalidInput):
            suggest_filter_ranges(self.draws, MEGA, last_n=501)

    def test_empty_history(self):
        with pytest.raises(EmptyHistory):
            suggest_filter_ranges([], MEGA)
