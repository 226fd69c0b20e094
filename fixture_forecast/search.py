"""Search filtering over already-resolved data, plus input debouncing."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

from .config import SEARCH_DEBOUNCE_SECONDS, setup_logger
from .domain.contracts import Fixture, StandingsEntry

logger = setup_logger(__name__)

_LATEST = datetime.max.replace(tzinfo=timezone.utc)


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def filter_standings(rows: Iterable[StandingsEntry], query: Optional[str] = None) -> List[StandingsEntry]:
    """Rows sorted by position, keeping those whose team name contains `query`."""
    q = normalize_query(query)
    ordered = sorted(rows, key=lambda entry: entry.position)
    if not q:
        return ordered
    return [entry for entry in ordered if q in entry.team.name.lower()]


def filter_fixtures(fixtures: Iterable[Fixture], query: Optional[str] = None) -> List[Fixture]:
    """Fixtures by kick-off (undated last), keeping those where either team contains `query`."""
    q = normalize_query(query)
    ordered = sorted(fixtures, key=lambda fixture: fixture.utc_date or _LATEST)
    if not q:
        return ordered
    return [
        fixture
        for fixture in ordered
        if q in fixture.home_team.name.lower() or q in fixture.away_team.name.lower()
    ]


class Debouncer:
    """Run `callback` once input has been quiet for `wait` seconds.

    Each call to :meth:`trigger` cancels the pending run and schedules a new
    one with the latest arguments. Must be used from inside a running event
    loop.
    """

    def __init__(self, callback: Callable[..., Any], wait: float = SEARCH_DEBOUNCE_SECONDS) -> None:
        self._callback = callback
        self._wait = max(0.0, float(wait))
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._wait, self._fire, args, kwargs)

    def _fire(self, args: tuple, kwargs: dict) -> None:
        self._handle = None
        self._callback(*args, **kwargs)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
