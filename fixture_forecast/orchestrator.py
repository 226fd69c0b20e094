"""Session orchestration: retrieval, state updates and per-fixture predictions.

A :class:`ForecastSession` owns the standings snapshot and fixture selection
for one user session. Retrieval is asynchronous; everything else is a pure,
synchronous pass over already-retrieved data.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from .config import SEARCH_DEBOUNCE_SECONDS, setup_logger
from .constants import (
    DEFAULT_MODE,
    FOOTBALL_DATA_SOURCE,
    MAX_FIXTURES,
    MODE_FIXTURES,
    MODE_STANDINGS,
    STANDINGS_TYPE_TOTAL,
    UNPLAYED_STATUSES,
)
from .domain.contracts import (
    Fixture,
    FixturePrediction,
    StandingsEntry,
    StandingsSnapshot,
)
from .errors import APIError
from .memo_store import MemoKey, MemoStore
from .name_resolver import resolve_entry
from .probability_model import compute_probabilities
from .scoreline_model import compute_scoreline
from .search import Debouncer, filter_fixtures, filter_standings
from .validators import optional_str, validate_league, validate_mode

logger = setup_logger(__name__)

RenderCallback = Callable[[str, list], None]


# ----------------------------- payload selection -----------------------------

def select_standings_block(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Return the TOTAL standings block, else the first block, else None."""
    blocks = payload.get("standings") or []
    for block in blocks:
        if isinstance(block, Mapping) and block.get("type") == STANDINGS_TYPE_TOTAL:
            return block
    first = blocks[0] if blocks else None
    return first if isinstance(first, Mapping) else None


def extract_snapshot(payload: Mapping[str, Any]) -> StandingsSnapshot:
    block = select_standings_block(payload)
    table = block.get("table") if block is not None else None
    if not isinstance(table, list):
        raise APIError(FOOTBALL_DATA_SOURCE, "no_standings", "No standings available")
    return tuple(StandingsEntry.from_payload(row) for row in table if isinstance(row, Mapping))


def select_unplayed(payload: Mapping[str, Any], limit: int = MAX_FIXTURES) -> Tuple[Fixture, ...]:
    """Unplayed fixtures in provider order, truncated to `limit`."""
    matches = payload.get("matches")
    if not isinstance(matches, list):
        raise APIError(FOOTBALL_DATA_SOURCE, "no_matches", "No matches available")
    competition_name = competition_name_of(payload)
    selected: List[Fixture] = []
    for match in matches:
        if len(selected) >= limit:
            break
        if not isinstance(match, Mapping):
            continue
        if str(match.get("status") or "").upper() not in UNPLAYED_STATUSES:
            continue
        selected.append(Fixture.from_payload(match, competition_name=competition_name))
    return tuple(selected)


def competition_name_of(payload: Mapping[str, Any]) -> Optional[str]:
    competition = payload.get("competition") or {}
    return optional_str(competition.get("name")) if isinstance(competition, Mapping) else None


def season_start_of(payload: Mapping[str, Any]) -> Optional[str]:
    season = payload.get("season") or {}
    return optional_str(season.get("startDate")) if isinstance(season, Mapping) else None


# ----------------------------- predictions -----------------------------------

def predict_fixture(fixture: Fixture, snapshot: Iterable[StandingsEntry]) -> FixturePrediction:
    snapshot = tuple(snapshot)
    home_entry = resolve_entry(fixture.home_team.name, snapshot)
    away_entry = resolve_entry(fixture.away_team.name, snapshot)
    return FixturePrediction(
        fixture=fixture,
        probability=compute_probabilities(home_entry, away_entry),
        scoreline=compute_scoreline(home_entry, away_entry),
    )


def predict_fixtures(
    fixtures: Iterable[Fixture], snapshot: Iterable[StandingsEntry]
) -> List[FixturePrediction]:
    snapshot = tuple(snapshot)
    return [predict_fixture(fixture, snapshot) for fixture in fixtures]


# ----------------------------- session ---------------------------------------

class ForecastSession:
    """State and coordination for one user session.

    Only the most recent (league, mode) request may update session state; a
    retrieval that completes after a newer selection has been made is
    discarded. The memo store is injected so its lifetime matches the
    session's.
    """

    def __init__(
        self,
        provider: Any,
        memo: Optional[MemoStore] = None,
        *,
        on_render: Optional[RenderCallback] = None,
        max_fixtures: int = MAX_FIXTURES,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self.provider = provider
        self.memo = memo if memo is not None else MemoStore()
        self.on_render = on_render
        self.max_fixtures = max_fixtures

        self.mode: str = DEFAULT_MODE
        self.league: Optional[str] = None
        self.snapshot: StandingsSnapshot = ()
        self.fixtures: Tuple[Fixture, ...] = ()
        self.competition_name: Optional[str] = None
        self.status: str = ""
        self.error: Optional[APIError] = None
        self.query: str = ""

        self._latest: Optional[MemoKey] = None
        self._debouncer = Debouncer(self.set_query, debounce_seconds)

    # -- retrieval --------------------------------------------------------

    async def _retrieve(
        self, league: str, mode: str, parse: Callable[[Mapping[str, Any]], Any]
    ) -> Tuple[Mapping[str, Any], Any]:
        """Return (payload, parsed); only payloads that parse are memoized."""
        cached = self.memo.get(league, mode)
        if cached is not None:
            return cached, parse(cached)

        fetch = self.provider.get_standings if mode == MODE_STANDINGS else self.provider.get_matches
        payload = await fetch(league)
        if not isinstance(payload, Mapping):
            raise APIError(FOOTBALL_DATA_SOURCE, "invalid_payload", f"Unexpected {mode} payload for {league}")
        parsed = parse(payload)
        self.memo.put(league, mode, payload)
        return payload, parsed

    def _begin(self, league: str, mode: str) -> MemoKey:
        key = (league, mode)
        self._latest = key
        return key

    def _is_stale(self, key: MemoKey) -> bool:
        if key == self._latest:
            return False
        logger.info(
            "discarding stale %s|%s result (latest=%s)",
            key[0], key[1], "|".join(self._latest) if self._latest else None,
        )
        return True

    def _fail(self, exc: APIError, what: str) -> None:
        logger.warning("Failed to load %s: %s", what, exc.to_dict())
        self.error = exc
        self.status = ""

    async def load_standings(self, league: str) -> bool:
        """Retrieve standings for `league` and replace the snapshot wholesale."""
        league = validate_league(league)
        key = self._begin(league, MODE_STANDINGS)
        self.status = "Loading standings…"
        self.snapshot = ()

        try:
            payload, snapshot = await self._retrieve(league, MODE_STANDINGS, extract_snapshot)
        except APIError as exc:
            if self._is_stale(key):
                return False
            self._fail(exc, f"standings for {league}")
            self.render()
            return False

        if self._is_stale(key):
            return False

        self.snapshot = snapshot
        self.competition_name = competition_name_of(payload)
        self.error = None
        season = season_start_of(payload) or ""
        self.status = f"{self.competition_name or league} · Season {season}".rstrip()
        self.render()
        return True

    async def load_fixtures(self, league: str) -> bool:
        """Retrieve standings then fixtures for `league`.

        Standings failures degrade to an empty snapshot so fixtures are still
        shown with fallback predictions.
        """
        league = validate_league(league)
        key = self._begin(league, MODE_FIXTURES)
        self.status = "Loading fixtures…"
        self.fixtures = ()

        try:
            _standings, snapshot = await self._retrieve(league, MODE_STANDINGS, extract_snapshot)
        except APIError as exc:
            logger.warning("Standings unavailable for %s, predicting without them: %s", league, exc.code)
            snapshot = ()

        if self._is_stale(key):
            return False
        self.snapshot = snapshot

        try:
            payload, fixtures = await self._retrieve(
                league, MODE_FIXTURES, lambda data: select_unplayed(data, self.max_fixtures)
            )
        except APIError as exc:
            if self._is_stale(key):
                return False
            self._fail(exc, f"fixtures for {league}")
            self.render()
            return False

        if self._is_stale(key):
            return False

        self.fixtures = fixtures
        self.competition_name = competition_name_of(payload)
        self.error = None
        self.status = f"{self.competition_name or league} · {len(fixtures)} upcoming fixtures"
        self.render()
        return True

    async def load(self, league: str, mode: str) -> bool:
        mode = validate_mode(mode)
        if mode == MODE_FIXTURES:
            return await self.load_fixtures(league)
        return await self.load_standings(league)

    # -- user selections --------------------------------------------------

    async def select_league(self, league: str) -> bool:
        self.league = validate_league(league)
        return await self.load(self.league, self.mode)

    async def switch_mode(self, mode: str) -> bool:
        """Change mode and reload for the current league; no-op for the current mode."""
        mode = validate_mode(mode)
        if mode == self.mode:
            return False
        self.mode = mode
        if self.league is None:
            self.status = "No league selected"
            return False
        return await self.load(self.league, mode)

    async def show(self, league: str, mode: str) -> bool:
        """Select both league and mode in one step."""
        self.mode = validate_mode(mode)
        return await self.select_league(league)

    # -- views ------------------------------------------------------------

    def predictions(self, query: Optional[str] = None) -> List[FixturePrediction]:
        q = self.query if query is None else query
        return predict_fixtures(filter_fixtures(self.fixtures, q), self.snapshot)

    def standings_rows(self, query: Optional[str] = None) -> List[StandingsEntry]:
        q = self.query if query is None else query
        return filter_standings(self.snapshot, q)

    def current_view(self) -> list:
        if self.mode == MODE_FIXTURES:
            return self.predictions()
        return self.standings_rows()

    def render(self) -> None:
        if self.on_render is not None:
            self.on_render(self.mode, self.current_view())

    # -- search -----------------------------------------------------------

    def set_query(self, query: Optional[str]) -> None:
        """Apply a search query immediately and re-render; never retrieves."""
        self.query = (query or "").strip()
        self.render()

    def search(self, query: Optional[str]) -> None:
        """Debounced :meth:`set_query`; call from inside the event loop."""
        self._debouncer.trigger(query)

    def close(self) -> None:
        self._debouncer.cancel()
