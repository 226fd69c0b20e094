"""football-data.org v4 client for competition standings and matches."""
from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional

import requests

from . import settings
from .config import API_TIMEOUT, setup_logger
from .constants import FOOTBALL_DATA_SOURCE, MAX_RETRIES
from .errors import APIError, RateLimitExceededError
from .logging_utils import warn_once
from .net_retry import request_with_retries
from .ports.fixtures import MatchesResponse
from .ports.standings import StandingsResponse
from .utils import sanitize_error_message

logger = setup_logger(__name__)

DEFAULT_RETRY_AFTER = 5  # seconds, when a 429 carries no Retry-After header
MAX_RETRY_AFTER = API_TIMEOUT  # upper bound on a single 429 wait


class FootballDataClient:
    """Blocking client; rotates API keys on 403/429 responses."""

    def __init__(
        self,
        api_keys: Optional[List[str]] = None,
        base_url: Optional[str] = None,
        *,
        match_limit: Optional[int] = None,
        max_attempts: int = MAX_RETRIES,
        session: Optional[Any] = None,
    ) -> None:
        self.api_keys = list(settings.FOOTBALL_DATA_API_KEYS if api_keys is None else api_keys)
        self.base_url = (base_url or settings.FOOTBALL_DATA_BASE_URL).rstrip("/") + "/"
        self.match_limit = match_limit or settings.FOOTBALL_DATA_MATCH_LIMIT
        self.max_attempts = max(1, int(max_attempts))
        self.session = session
        self._key_index = 0

    def _next_headers(self) -> Dict[str, str]:
        if not self.api_keys:
            warn_once(
                "football_data_no_key",
                "No FOOTBALL_DATA_API_KEY configured; requests are sent unauthenticated.",
                logger=logger,
            )
            return {}
        key = self.api_keys[self._key_index]
        self._key_index = (self._key_index + 1) % len(self.api_keys)
        return {"X-Auth-Token": key}

    def _make_api_request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = request_with_retries(
                    "GET",
                    url,
                    headers=self._next_headers(),
                    params=params,
                    session=self.session,
                    logger=logger,
                    context=f"football-data {endpoint}",
                )
            except requests.exceptions.HTTPError as exc:
                status = getattr(exc.response, "status_code", None)
                if status == 429:
                    retry_after = _retry_after_seconds(exc.response)
                    logger.warning(
                        "Rate limit hit for %s (attempt %d/%d), retrying after %ss",
                        endpoint, attempt, self.max_attempts, retry_after,
                    )
                    time.sleep(retry_after)
                    continue
                if status == 403 and len(self.api_keys) > 1:
                    logger.warning("403 Forbidden for %s, switching API key", endpoint)
                    continue
                raise APIError(
                    FOOTBALL_DATA_SOURCE,
                    f"http_{status}" if status else "http_error",
                    f"football-data.org returned HTTP {status} for {endpoint}",
                    sanitize_error_message(str(exc)),
                ) from exc
            except requests.exceptions.RequestException as exc:
                raise APIError(
                    FOOTBALL_DATA_SOURCE,
                    "network_error",
                    f"Could not reach football-data.org for {endpoint}",
                    sanitize_error_message(str(exc)),
                ) from exc

            try:
                payload = response.json()
            except ValueError as exc:
                raise APIError(
                    FOOTBALL_DATA_SOURCE,
                    "invalid_json",
                    f"football-data.org sent a non-JSON body for {endpoint}",
                ) from exc
            if not isinstance(payload, dict):
                raise APIError(
                    FOOTBALL_DATA_SOURCE,
                    "invalid_payload",
                    f"Unexpected payload type {type(payload).__name__} for {endpoint}",
                )
            return payload

        raise RateLimitExceededError(endpoint, self.max_attempts)

    def get_standings(self, league: str) -> StandingsResponse:
        """Fetch `/competitions/{league}/standings`."""
        data = self._make_api_request(f"competitions/{league}/standings")
        if not isinstance(data.get("standings"), list):
            raise APIError(FOOTBALL_DATA_SOURCE, "no_standings", f"No standings available for {league}")
        return data  # type: ignore[return-value]

    def get_matches(self, league: str) -> MatchesResponse:
        """Fetch `/competitions/{league}/matches`, capped at `match_limit` rows."""
        data = self._make_api_request(
            f"competitions/{league}/matches", params={"limit": self.match_limit}
        )
        if not isinstance(data.get("matches"), list):
            raise APIError(FOOTBALL_DATA_SOURCE, "no_matches", f"No matches available for {league}")
        return data  # type: ignore[return-value]


def _retry_after_seconds(response: Any) -> float:
    headers = getattr(response, "headers", None) or {}
    try:
        seconds = max(0, int(headers.get("Retry-After", DEFAULT_RETRY_AFTER)))
    except (TypeError, ValueError):
        seconds = DEFAULT_RETRY_AFTER
    return min(seconds, MAX_RETRY_AFTER)


class FootballDataProvider:
    """Asynchronous provider facade; each call runs the blocking client in a worker thread."""

    def __init__(self, client: Optional[FootballDataClient] = None) -> None:
        self.client = client or FootballDataClient()

    async def get_standings(self, league: str) -> StandingsResponse:
        return await asyncio.to_thread(self.client.get_standings, league)

    async def get_matches(self, league: str) -> MatchesResponse:
        return await asyncio.to_thread(self.client.get_matches, league)


__all__ = ["FootballDataClient", "FootballDataProvider"]
