from typing import Any, Optional

from .constants import LEAGUE_CODE_MAPPING, MODES
from .config import setup_logger

logger = setup_logger(__name__)

LEAGUE_ALIAS_MAPPING = {
    "EPL": "PL",
    "PREMIER_LEAGUE": "PL",
    "ENGLISH_PREMIER_LEAGUE": "PL",
    "LA_LIGA": "PD",
    "LALIGA": "PD",
    "PRIMERA_DIVISION": "PD",
    "BUNDESLIGA": "BL1",
    "SERIE_A": "SA",
    "SERIEA": "SA",
    "LIGUE_1": "FL1",
    "LIGUE1": "FL1",
    "CHAMPIONS_LEAGUE": "CL",
    "UCL": "CL",
    "EUROPA_LEAGUE": "EL",
    "UEL": "EL",
    "EREDIVISIE": "DED",
    "PRIMEIRA_LIGA": "PPL",
    "CHAMPIONSHIP": "ELC",
}


def validate_league(code: Optional[str]) -> str:
    """Return the normalized football-data competition code or raise ValueError."""
    if not code or not str(code).strip():
        raise ValueError("League code is required")
    c = str(code).upper().strip()
    alias_key = c.replace(" ", "_")
    if c in LEAGUE_CODE_MAPPING:
        return c
    alias_match = LEAGUE_ALIAS_MAPPING.get(alias_key)
    if alias_match:
        return alias_match
    logger.warning("league_unknown: %s", c)
    allowed = ", ".join(LEAGUE_CODE_MAPPING)
    raise ValueError(f"Unsupported league code: {c}. Allowed: {allowed}")


def validate_mode(mode: Optional[str]) -> str:
    """Normalize a session mode name; raise ValueError when unknown."""
    m = (mode or "").strip().lower()
    if m in MODES:
        return m
    raise ValueError(f"Unsupported mode: {mode!r}. Allowed: {', '.join(MODES)}")


def coerce_int(value: Any, default: int = 0) -> int:
    """Coerce a loosely-typed payload value to int, falling back to `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def optional_str(value: Any) -> Optional[str]:
    """Return a stripped string or None for blank/missing payload values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
