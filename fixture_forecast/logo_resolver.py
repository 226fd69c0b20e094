import re
import unicodedata
from typing import List, Optional
from urllib.parse import quote

from .config import setup_logger
from .constants import LOCAL_LOGO_EXTENSIONS, LOCAL_LOGO_ROOT
from .domain.contracts import TeamRef

logger = setup_logger(__name__)

PLACEHOLDER_SVG = "data:image/svg+xml;utf8," + quote(
    '<svg xmlns="http://www.w3.org/2000/svg" width="64" height="64" viewBox="0 0 64 64">'
    '<rect width="100%" height="100%" fill="#222"/>'
    '<text x="50%" y="50%" fill="#777" font-size="10" font-family="Arial" '
    'text-anchor="middle" alignment-baseline="middle">no logo</text>'
    '</svg>',
    safe="",
)


def _strip_accents(s: str) -> str:
    return "".join(c for c in unicodedata.normalize("NFKD", s) if not unicodedata.combining(c))


def sanitize_filename(name: Optional[str]) -> str:
    """Slug used for local crest files, e.g. "Brighton & Hove" -> "brighton-and-hove"."""
    s = _strip_accents(str(name or "")).lower()
    s = s.replace("&", "and")
    s = re.sub(r"[^a-z0-9\s-]", "", s).strip()
    s = re.sub(r"\s+", "-", s)
    return re.sub(r"-+", "-", s)


def _secure(url: str) -> str:
    return "https:" + url[len("http:"):] if url.startswith("http:") else url


def crest_candidates(team: Optional[TeamRef], logo_root: str = LOCAL_LOGO_ROOT) -> List[str]:
    """Ordered crest sources to try; the placeholder is always last."""
    candidates: List[str] = []
    if team is None:
        return [PLACEHOLDER_SVG]

    if team.crest_url:
        candidates.append(_secure(team.crest_url))

    local_name = sanitize_filename(team.name or team.short_name or team.tla)
    if local_name:
        candidates.extend(f"{logo_root}/{local_name}.{ext}" for ext in LOCAL_LOGO_EXTENSIONS)
    else:
        logger.debug("Logo fallback for team=%r", team)

    candidates.append(PLACEHOLDER_SVG)
    return candidates
