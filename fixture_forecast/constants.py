"""Centralized constants for the fixture forecast engine."""

# Session modes
MODE_STANDINGS = "standings"
MODE_FIXTURES = "fixtures"
MODES = (MODE_STANDINGS, MODE_FIXTURES)
DEFAULT_MODE = MODE_FIXTURES

# Fixture selection
MAX_FIXTURES = 16  # unplayed fixtures shown per league
UNPLAYED_STATUSES = ("SCHEDULED", "TIMED", "POSTPONED")
DEFAULT_MATCH_LIMIT = 50  # `limit` query parameter on the matches endpoint

# Standings block used for predictions
STANDINGS_TYPE_TOTAL = "TOTAL"

# Probability model
FALLBACK_PROBABILITY = (50, 30, 20)  # home, draw, away when no history exists

# Scoreline model
HOME_BASELINE_GOALS = 1.0
AWAY_BASELINE_GOALS = 0.8  # lower than home: models home advantage
NEUTRAL_SCORELINE = (1, 1)  # replaces a 0-0 prediction

# Search
DEFAULT_SEARCH_DEBOUNCE_MS = 120

# API
API_TIMEOUT_FOOTBALL_DATA = 15  # football-data.org timeout (seconds)
MAX_RETRIES = 3
FOOTBALL_DATA_SOURCE = "football-data"

# football-data.org competition codes
LEAGUE_CODE_MAPPING = {
    "PL": "Premier League",
    "PD": "Primera Division",
    "BL1": "Bundesliga",
    "SA": "Serie A",
    "FL1": "Ligue 1",
    "CL": "UEFA Champions League",
    "EL": "UEFA Europa League",
    "DED": "Eredivisie",
    "PPL": "Primeira Liga",
    "ELC": "Championship",
}

# Crest fallbacks
LOCAL_LOGO_ROOT = "logos"
LOCAL_LOGO_EXTENSIONS = ("svg", "png", "jpg")
