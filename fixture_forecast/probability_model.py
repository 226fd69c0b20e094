"""Home/draw/away percentage split derived from standings records."""
from typing import Optional

from .config import setup_logger
from .constants import FALLBACK_PROBABILITY
from .domain.contracts import ProbabilityResult, StandingsEntry

logger = setup_logger(__name__)


def percent_half_up(part: int, total: int) -> int:
    """Return round(100 * part / total) with halves rounded up, in exact integers."""
    return (200 * part + total) // (2 * total)


def _record(entry: Optional[StandingsEntry]) -> tuple[int, int, int]:
    if entry is None:
        return 0, 0, 0
    return entry.won, entry.draw, entry.lost


def outcome_scores(
    home_entry: Optional[StandingsEntry], away_entry: Optional[StandingsEntry]
) -> tuple[int, int, int]:
    """Return the (home, draw, away) scores the percentages are built from.

    The away score reuses the home side's draw count rather than the away
    side's; downstream consumers depend on this weighting.
    """
    home_won, home_draw, _home_lost = _record(home_entry)
    away_won, away_draw, away_lost = _record(away_entry)

    home_score = home_won + away_lost
    draw_score = home_draw + away_draw
    away_score = away_won + home_draw
    return home_score, draw_score, away_score


def compute_probabilities(
    home_entry: Optional[StandingsEntry], away_entry: Optional[StandingsEntry]
) -> ProbabilityResult:
    """Convert two resolved standings entries into a three-way split.

    Missing entries count as zero wins, draws and losses. With no history
    at all the fixed fallback split is returned. Rounding error is absorbed
    by the away percentage so the three values always sum to 100.
    """
    home_score, draw_score, away_score = outcome_scores(home_entry, away_entry)
    raw = (home_score, draw_score, away_score)
    total = home_score + draw_score + away_score

    if total <= 0:
        home_pct, draw_pct, away_pct = FALLBACK_PROBABILITY
        return ProbabilityResult(home_pct, draw_pct, away_pct, raw=raw)

    home_pct = percent_half_up(home_score, total)
    draw_pct = percent_half_up(draw_score, total)
    if home_pct + draw_pct > 100:
        # Both rounded up on a .5 boundary while the away score is zero.
        logger.debug(
            "probability: capping draw %d%% (home %d%%, raw=%s)", draw_pct, home_pct, raw
        )
        draw_pct = 100 - home_pct
    away_pct = 100 - home_pct - draw_pct

    return ProbabilityResult(home_pct, draw_pct, away_pct, raw=raw)


__all__ = ["compute_probabilities", "outcome_scores", "percent_half_up"]
