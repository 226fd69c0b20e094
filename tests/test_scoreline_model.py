import itertools

import pytest

from fixture_forecast.domain.contracts import ScorelineResult, StandingsEntry, TeamRef
from fixture_forecast.scoreline_model import (
    compute_scoreline,
    goal_difference_per_match,
    round_half_up,
)


def side(goal_difference, played):
    return StandingsEntry(
        position=1,
        team=TeamRef(name="Team"),
        played_games=played,
        goal_difference=goal_difference,
    )


def test_worked_example():
    result = compute_scoreline(side(20, 18), side(-6, 18))

    assert result == ScorelineResult(2, 0)
    assert result.details.home_gd_per_match == pytest.approx(1.111, abs=1e-3)
    assert result.details.away_gd_per_match == pytest.approx(-0.333, abs=1e-3)
    assert result.details.raw_home == pytest.approx(1.444, abs=1e-3)
    assert result.details.raw_away == pytest.approx(-1.444, abs=1e-3)


def test_both_absent_gives_baselines():
    assert compute_scoreline(None, None) == ScorelineResult(1, 1)


def test_stronger_away_side():
    assert compute_scoreline(side(-18, 18), side(18, 18)) == ScorelineResult(0, 3)


def test_no_games_played_counts_as_zero():
    assert goal_difference_per_match(side(5, 0)) == 0.0
    assert goal_difference_per_match(None) == 0.0
    assert compute_scoreline(side(5, 0), side(-5, 0)) == ScorelineResult(1, 1)


def test_halves_round_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(0.49) == 0
    # home 1.5 GD per match vs an unplayed side: 2.5 -> 3
    assert compute_scoreline(side(3, 2), None) == ScorelineResult(3, 0)


def test_zero_zero_is_replaced_by_one_one():
    result = compute_scoreline(None, None, home_baseline=0.2, away_baseline=0.2)
    assert result == ScorelineResult(1, 1)


def test_one_zero_is_kept():
    result = compute_scoreline(None, None, home_baseline=0.6, away_baseline=0.2)
    assert result == ScorelineResult(1, 0)


def test_goals_never_negative_and_never_both_zero():
    for home_gd, away_gd, home_played, away_played in itertools.product(
        range(-12, 13, 3), range(-12, 13, 3), (0, 1, 4), (0, 2, 6)
    ):
        result = compute_scoreline(side(home_gd, home_played), side(away_gd, away_played))
        assert result.home_goals >= 0
        assert result.away_goals >= 0
        assert (result.home_goals, result.away_goals) != (0, 0)
