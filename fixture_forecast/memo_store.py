"""Session-scoped memoization of retrieved provider payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .config import setup_logger
from .constants import MODES

logger = setup_logger(__name__)

MemoKey = Tuple[str, str]


def memo_key(league: str, mode: str) -> MemoKey:
    """Build the (league, mode) key; league codes are upper-cased."""

    league_key = (league or "").strip().upper()
    mode_key = (mode or "").strip().lower()
    if not league_key:
        raise ValueError("league is required for a memo key")
    if mode_key not in MODES:
        raise ValueError(f"unknown mode for memo key: {mode!r}")
    return league_key, mode_key


@dataclass
class MemoStore:
    """Fetch-once cache of raw payloads for one session.

    Entries are never evicted, refreshed or invalidated. Two retrievals for
    the same key racing to `put` both run; the last writer wins.
    """

    payloads: Dict[MemoKey, Any] = field(default_factory=dict)

    def get(self, league: str, mode: str) -> Optional[Any]:
        key = memo_key(league, mode)
        payload = self.payloads.get(key)
        if payload is not None:
            logger.debug("memo hit: %s|%s", *key)
        return payload

    def put(self, league: str, mode: str, payload: Any) -> None:
        if payload is None:
            raise ValueError("refusing to memoize an empty payload")
        key = memo_key(league, mode)
        if key in self.payloads:
            logger.debug("memo overwrite: %s|%s", *key)
        self.payloads[key] = payload

    def __contains__(self, key: object) -> bool:
        return key in self.payloads

    def __len__(self) -> int:
        return len(self.payloads)
