from typing import List, Optional, TypedDict, NotRequired


class TeamPayload(TypedDict):
    name: str
    id: NotRequired[int]
    shortName: NotRequired[Optional[str]]
    tla: NotRequired[Optional[str]]
    crest: NotRequired[Optional[str]]


class StandingRowPayload(TypedDict):
    position: int
    team: TeamPayload
    playedGames: int
    won: int
    draw: int
    lost: int
    points: int
    goalsFor: int
    goalsAgainst: int
    goalDifference: int
    form: NotRequired[Optional[str]]


class StandingsBlock(TypedDict):
    type: str                  # "TOTAL" | "HOME" | "AWAY"
    table: List[StandingRowPayload]
    stage: NotRequired[str]
    group: NotRequired[Optional[str]]


class StandingsResponse(TypedDict):
    competition: NotRequired[dict]   # {"name": ...}
    season: NotRequired[dict]        # {"startDate": "YYYY-MM-DD", ...}
    standings: List[StandingsBlock]


class StandingsPort:
    async def get_standings(self, league: str) -> StandingsResponse: ...
