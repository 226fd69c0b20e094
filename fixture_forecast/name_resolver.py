"""Team name resolution against a standings snapshot."""
from __future__ import annotations

import os
from typing import Dict, Iterable, Optional

from .config import setup_logger
from .domain.contracts import StandingsEntry
from .logging_utils import KeyedThrottle

logger = setup_logger(__name__)

LOG_THROTTLE_INTERVAL = float(os.environ.get("LOG_THROTTLE_INTERVAL", "300"))
_miss_log = KeyedThrottle(logger, window_seconds=LOG_THROTTLE_INTERVAL)


def canonicalize_team(raw: str | None) -> str:
    """Normalize a team name for comparison: trimmed and case-folded."""

    if raw is None:
        return ""
    return str(raw).strip().casefold()


def _identifiers(entry: StandingsEntry) -> tuple[str, str, str]:
    team = entry.team
    return (
        canonicalize_team(team.name),
        canonicalize_team(team.short_name),
        canonicalize_team(team.tla),
    )


def _matches(query: str, entry: StandingsEntry) -> bool:
    name, short, tla = _identifiers(entry)
    if query in (name, short, tla):
        return True
    # A blank entry name would be a substring of every query.
    if not name:
        return False
    return query in name or name in query


def resolve_entry(
    name: str | None, snapshot: Iterable[StandingsEntry]
) -> Optional[StandingsEntry]:
    """Return the first standings entry whose team matches `name`.

    Matching is order-sensitive: the snapshot is scanned in its given order
    and the first entry whose name, short name or TLA equals the query, or
    whose name contains (or is contained in) the query, wins. Short queries
    can therefore over-match; callers wanting exact behaviour should use
    :class:`TeamIndex`.

    Args:
        name: Free-text team name, typically taken from a fixture.
        snapshot: Standings rows for the fixture's competition.

    Returns:
        The matching entry, or None for a blank query or no match.
    """

    query = canonicalize_team(name)
    if not query:
        return None

    for entry in snapshot:
        if _matches(query, entry):
            return entry

    _miss_log(("miss", query), "resolver: no standings entry for '%s'", name)
    return None


class TeamIndex:
    """Exact-match lookup over a snapshot, built once per snapshot.

    Name, short name and TLA all map to their entry; when two entries share
    an identifier the earlier one in the snapshot keeps it. With
    ``substring_fallback`` enabled, misses fall back to :func:`resolve_entry`.
    """

    def __init__(self, snapshot: Iterable[StandingsEntry], *, substring_fallback: bool = False):
        self._snapshot = tuple(snapshot)
        self._substring_fallback = substring_fallback
        self._by_identifier: Dict[str, StandingsEntry] = {}
        for entry in self._snapshot:
            for identifier in _identifiers(entry):
                if identifier:
                    self._by_identifier.setdefault(identifier, entry)

    def __len__(self) -> int:
        return len(self._snapshot)

    def resolve(self, name: str | None) -> Optional[StandingsEntry]:
        query = canonicalize_team(name)
        if not query:
            return None
        entry = self._by_identifier.get(query)
        if entry is not None or not self._substring_fallback:
            return entry
        return resolve_entry(query, self._snapshot)


def _reset_miss_log_throttle_for_tests(interval: Optional[float] = None) -> None:
    _miss_log.reset(LOG_THROTTLE_INTERVAL if interval is None else interval)


__all__ = [
    "TeamIndex",
    "canonicalize_team",
    "resolve_entry",
]
