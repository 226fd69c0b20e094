"""Structured types for standings, fixtures and per-fixture predictions.

Provider payloads are loosely typed JSON records. They are validated and
defaulted here, once, so the resolver and the models only ever see
well-formed values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from ..validators import coerce_int, optional_str

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_utc_date(value: Any) -> Optional[datetime]:
    """Parse a provider timestamp into an aware UTC datetime (None if invalid)."""
    if not value:
        return None
    text = str(value).strip()
    try:
        return datetime.strptime(text, _ISO_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_utc_date(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).strftime(_ISO_FORMAT)


@dataclass(frozen=True)
class TeamRef:
    name: str
    short_name: Optional[str] = None
    tla: Optional[str] = None
    crest_url: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "TeamRef":
        if not isinstance(payload, Mapping):
            payload = {}
        return cls(
            name=optional_str(payload.get("name")) or "",
            short_name=optional_str(payload.get("shortName")),
            tla=optional_str(payload.get("tla")),
            crest_url=optional_str(payload.get("crest") or payload.get("crestUrl")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "shortName": self.short_name,
            "tla": self.tla,
            "crestUrl": self.crest_url,
        }


@dataclass(frozen=True)
class StandingsEntry:
    position: int
    team: TeamRef
    played_games: int = 0
    won: int = 0
    draw: int = 0
    lost: int = 0
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StandingsEntry":
        return cls(
            position=coerce_int(payload.get("position")),
            team=TeamRef.from_payload(payload.get("team")),
            played_games=coerce_int(payload.get("playedGames")),
            won=coerce_int(payload.get("won")),
            draw=coerce_int(payload.get("draw")),
            lost=coerce_int(payload.get("lost")),
            points=coerce_int(payload.get("points")),
            goals_for=coerce_int(payload.get("goalsFor")),
            goals_against=coerce_int(payload.get("goalsAgainst")),
            goal_difference=coerce_int(payload.get("goalDifference")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "team": self.team.to_dict(),
            "playedGames": self.played_games,
            "won": self.won,
            "draw": self.draw,
            "lost": self.lost,
            "points": self.points,
            "goalsFor": self.goals_for,
            "goalsAgainst": self.goals_against,
            "goalDifference": self.goal_difference,
        }


StandingsSnapshot = Tuple[StandingsEntry, ...]
"""Ordered standings rows for one competition at one retrieval instant."""


@dataclass(frozen=True)
class Fixture:
    home_team: TeamRef
    away_team: TeamRef
    utc_date: Optional[datetime]
    status: str
    competition_name: Optional[str] = None
    venue: Optional[str] = None
    match_id: Optional[int] = None

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], competition_name: Optional[str] = None
    ) -> "Fixture":
        competition = payload.get("competition")
        if not isinstance(competition, Mapping):
            competition = {}
        raw_id = payload.get("id")
        return cls(
            home_team=TeamRef.from_payload(payload.get("homeTeam")),
            away_team=TeamRef.from_payload(payload.get("awayTeam")),
            utc_date=parse_utc_date(payload.get("utcDate")),
            status=(optional_str(payload.get("status")) or "").upper(),
            competition_name=optional_str(competition.get("name")) or competition_name,
            venue=optional_str(payload.get("venue")),
            match_id=coerce_int(raw_id) if raw_id is not None else None,
        )

    @property
    def status_label(self) -> str:
        return "Timed" if self.status == "TIMED" else "Scheduled"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.match_id,
            "homeTeam": self.home_team.to_dict(),
            "awayTeam": self.away_team.to_dict(),
            "utcDate": format_utc_date(self.utc_date),
            "status": self.status,
            "statusLabel": self.status_label,
            "competitionName": self.competition_name,
            "venue": self.venue,
        }


@dataclass(frozen=True)
class ProbabilityResult:
    """Three-way outcome split in whole percentages; always sums to 100."""

    home_pct: int
    draw_pct: int
    away_pct: int
    # (homeScore, drawScore, awayScore) the split was derived from
    raw: Optional[Tuple[int, int, int]] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "homePct": self.home_pct,
            "drawPct": self.draw_pct,
            "awayPct": self.away_pct,
        }
        if self.raw is not None:
            home, draw, away = self.raw
            payload["raw"] = {"home": home, "draw": draw, "away": away}
        return payload


@dataclass(frozen=True)
class ScorelineDetails:
    home_gd_per_match: float
    away_gd_per_match: float
    raw_home: float
    raw_away: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "homeGDpm": round(self.home_gd_per_match, 3),
            "awayGDpm": round(self.away_gd_per_match, 3),
            "rawHome": round(self.raw_home, 3),
            "rawAway": round(self.raw_away, 3),
        }


@dataclass(frozen=True)
class ScorelineResult:
    home_goals: int
    away_goals: int
    details: Optional[ScorelineDetails] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "homeGoals": self.home_goals,
            "awayGoals": self.away_goals,
        }
        if self.details is not None:
            payload["details"] = self.details.to_dict()
        return payload


@dataclass(frozen=True)
class FixturePrediction:
    """Record handed to the presentation layer for one fixture."""

    fixture: Fixture
    probability: ProbabilityResult
    scoreline: ScorelineResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixture": self.fixture.to_dict(),
            "probability": self.probability.to_dict(),
            "scoreline": self.scoreline.to_dict(),
        }
