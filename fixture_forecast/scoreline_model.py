"""
Predicted scoreline from goal difference per match.

Each side's goal difference per match is compared with the opponent's,
shifted by a baseline (higher for the home side) and rounded to whole goals.
"""
import math
from typing import Optional

from .constants import AWAY_BASELINE_GOALS, HOME_BASELINE_GOALS, NEUTRAL_SCORELINE
from .domain.contracts import ScorelineDetails, ScorelineResult, StandingsEntry


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def goal_difference_per_match(entry: Optional[StandingsEntry]) -> float:
    """Goal difference divided by games played; 0.0 before a first match."""
    if entry is None or entry.played_games <= 0:
        return 0.0
    return entry.goal_difference / entry.played_games


def compute_scoreline(
    home_entry: Optional[StandingsEntry],
    away_entry: Optional[StandingsEntry],
    *,
    home_baseline: float = HOME_BASELINE_GOALS,
    away_baseline: float = AWAY_BASELINE_GOALS,
) -> ScorelineResult:
    home_gdpm = goal_difference_per_match(home_entry)
    away_gdpm = goal_difference_per_match(away_entry)

    raw_home = home_gdpm - away_gdpm
    raw_away = away_gdpm - home_gdpm

    pred_home = max(0.0, raw_home + home_baseline)
    pred_away = max(0.0, raw_away + away_baseline)

    home_goals = max(0, round_half_up(pred_home))
    away_goals = max(0, round_half_up(pred_away))

    if home_goals == 0 and away_goals == 0:
        home_goals, away_goals = NEUTRAL_SCORELINE

    details = ScorelineDetails(
        home_gd_per_match=home_gdpm,
        away_gd_per_match=away_gdpm,
        raw_home=raw_home,
        raw_away=raw_away,
    )
    return ScorelineResult(home_goals, away_goals, details=details)


__all__ = ["compute_scoreline", "goal_difference_per_match", "round_half_up"]
