import os
from dotenv import load_dotenv

from .constants import DEFAULT_MATCH_LIMIT

# Load .env from repo root (dotenv auto-walks up from CWD)
load_dotenv()


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return None


def _collect_api_keys() -> list[str]:
    keys = [
        os.getenv("FOOTBALL_DATA_API_KEY")
        or _read_secret_file(os.getenv("FOOTBALL_DATA_API_KEY_FILE")),
        os.getenv("FOOTBALL_DATA_API_KEY_1"),
        os.getenv("FOOTBALL_DATA_API_KEY_2"),
        os.getenv("FOOTBALL_DATA_API_KEY_3"),
    ]
    # Filter out unset values, keep order, drop duplicates
    ordered: list[str] = []
    for key in keys:
        if key and key not in ordered:
            ordered.append(key)
    return ordered


# --- football-data.org settings ---
FOOTBALL_DATA_API_KEYS = _collect_api_keys()
FOOTBALL_DATA_BASE_URL = os.getenv("FOOTBALL_DATA_BASE_URL", "https://api.football-data.org/v4/")
FOOTBALL_DATA_MATCH_LIMIT = int(os.getenv("FOOTBALL_DATA_MATCH_LIMIT", DEFAULT_MATCH_LIMIT))
