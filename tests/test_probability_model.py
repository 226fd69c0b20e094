import itertools

import pytest

from fixture_forecast.domain.contracts import ProbabilityResult, StandingsEntry, TeamRef
from fixture_forecast.probability_model import (
    compute_probabilities,
    outcome_scores,
    percent_half_up,
)


def record(won, draw, lost, **kwargs):
    return StandingsEntry(position=1, team=TeamRef(name="Team"), won=won, draw=draw, lost=lost, **kwargs)


def test_worked_example():
    home = record(10, 5, 3)
    away = record(4, 6, 8)

    assert outcome_scores(home, away) == (18, 11, 9)

    result = compute_probabilities(home, away)
    assert (result.home_pct, result.draw_pct, result.away_pct) == (47, 29, 24)
    assert result.raw == (18, 11, 9)


def test_both_absent_uses_fallback():
    result = compute_probabilities(None, None)
    assert result == ProbabilityResult(50, 30, 20)


def test_season_not_started_uses_fallback():
    assert compute_probabilities(record(0, 0, 0), record(0, 0, 0)) == ProbabilityResult(50, 30, 20)


def test_absent_side_counts_as_zero():
    result = compute_probabilities(record(3, 0, 0), None)
    assert result == ProbabilityResult(100, 0, 0)


def test_away_score_reuses_home_draws():
    home = record(0, 2, 0)
    away = record(1, 7, 0)
    # home = 0 + 0, draw = 2 + 7, away = 1 + 2
    assert outcome_scores(home, away) == (0, 9, 3)


def test_away_absorbs_rounding():
    # a third each: 33 + 33 leaves 34 for away
    home = record(1, 0, 0)
    away = record(1, 1, 0)
    assert outcome_scores(home, away) == (1, 1, 1)
    result = compute_probabilities(home, away)
    assert (result.home_pct, result.draw_pct, result.away_pct) == (33, 33, 34)


def test_half_boundaries_never_push_away_negative():
    # home 101, draw 99, away 0 -> 50.5 and 49.5 both round up to 101
    home = record(101, 0, 0)
    away = record(0, 99, 0)
    assert outcome_scores(home, away) == (101, 99, 0)

    result = compute_probabilities(home, away)
    assert result.home_pct == 51
    assert result.draw_pct == 49
    assert result.away_pct == 0


@pytest.mark.parametrize("part,total,expected", [(1, 2, 50), (1, 8, 13), (1, 200, 1), (1, 201, 0), (3, 3, 100)])
def test_percent_half_up(part, total, expected):
    assert percent_half_up(part, total) == expected


def test_split_always_sums_to_100_and_non_negative():
    values = range(0, 7)
    for hw, hd, al, aw, ad in itertools.product(values, repeat=5):
        result = compute_probabilities(record(hw, hd, 0), record(aw, ad, al))
        assert result.home_pct + result.draw_pct + result.away_pct == 100
        assert min(result.home_pct, result.draw_pct, result.away_pct) >= 0
