from typing import List, Optional, TypedDict, NotRequired

from .standings import TeamPayload


class MatchPayload(TypedDict):
    homeTeam: TeamPayload
    awayTeam: TeamPayload
    utcDate: str               # ISO8601 UTC, e.g. "2025-10-18T14:00:00Z"
    status: str                # "SCHEDULED" | "TIMED" | "POSTPONED" | "FINISHED" | ...
    id: NotRequired[int]
    matchday: NotRequired[Optional[int]]
    venue: NotRequired[Optional[str]]
    competition: NotRequired[dict]


class MatchesResponse(TypedDict):
    competition: NotRequired[dict]
    matches: List[MatchPayload]


class FixturesPort:
    async def get_matches(self, league: str) -> MatchesResponse: ...
