import asyncio
import logging

import pytest
import requests

from fixture_forecast import football_data_api
from fixture_forecast.errors import APIError, RateLimitExceededError
from fixture_forecast.football_data_api import FootballDataClient, FootballDataProvider
from fixture_forecast.logging_utils import reset_warn_once_cache
from fixture_forecast.utils import sanitize_error_message


class FakeJSONResponse:
    def __init__(self, status_code, payload=None, headers=None, url="https://api.football-data.test/v4/x"):
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self._payload = payload
        self.headers = headers or {}
        self.url = url

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Client Error: {self.reason} for url: {self.url}",
                response=self,
            )

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON payload configured")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError("No more responses configured")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


STANDINGS = {"competition": {"name": "Premier League"}, "standings": [{"type": "TOTAL", "table": []}]}
MATCHES = {"competition": {"name": "Premier League"}, "matches": []}


@pytest.fixture(autouse=True)
def fresh_warn_once():
    reset_warn_once_cache()
    yield
    reset_warn_once_cache()


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr("fixture_forecast.football_data_api.time.sleep", recorded.append)
    return recorded


def make_client(responses, keys=("key-1",), **kwargs):
    session = FakeSession(responses)
    client = FootballDataClient(
        list(keys), "https://api.football-data.test/v4", session=session, match_limit=50, **kwargs
    )
    return client, session


def test_get_standings_success(sleeps):
    client, session = make_client([FakeJSONResponse(200, STANDINGS)])

    assert client.get_standings("PL") == STANDINGS

    call = session.calls[0]
    assert call["url"] == "https://api.football-data.test/v4/competitions/PL/standings"
    assert call["headers"] == {"X-Auth-Token": "key-1"}


def test_get_matches_passes_limit(sleeps):
    client, session = make_client([FakeJSONResponse(200, MATCHES)])

    assert client.get_matches("BL1") == MATCHES
    assert session.calls[0]["url"].endswith("/competitions/BL1/matches")
    assert session.calls[0]["params"] == {"limit": 50}


def test_server_errors_are_retried(sleeps):
    client, session = make_client(
        [FakeJSONResponse(502), FakeJSONResponse(503), FakeJSONResponse(200, STANDINGS)]
    )

    assert client.get_standings("PL") == STANDINGS
    assert len(session.calls) == 3


def test_rate_limit_rotates_key_and_honours_retry_after(sleeps):
    client, session = make_client(
        [FakeJSONResponse(429, headers={"Retry-After": "7"}), FakeJSONResponse(200, STANDINGS)],
        keys=("key-1", "key-2"),
    )

    assert client.get_standings("PL") == STANDINGS
    assert [c["headers"]["X-Auth-Token"] for c in session.calls] == ["key-1", "key-2"]
    assert 7 in sleeps


def test_rate_limit_exhaustion_raises(sleeps):
    client, session = make_client([FakeJSONResponse(429) for _ in range(3)], max_attempts=3)

    with pytest.raises(RateLimitExceededError) as excinfo:
        client.get_standings("PL")

    assert excinfo.value.code == "rate_limited"
    assert len(session.calls) == 3
    assert 5 in sleeps


def test_forbidden_with_single_key_is_an_error(sleeps):
    client, _session = make_client([FakeJSONResponse(403)])

    with pytest.raises(APIError) as excinfo:
        client.get_standings("PL")
    assert excinfo.value.code == "http_403"


def test_forbidden_switches_key_when_several_configured(sleeps):
    client, session = make_client(
        [FakeJSONResponse(403), FakeJSONResponse(200, STANDINGS)], keys=("bad", "good")
    )

    assert client.get_standings("PL") == STANDINGS
    assert session.calls[-1]["headers"] == {"X-Auth-Token": "good"}


def test_not_found_is_not_retried(sleeps):
    client, session = make_client([FakeJSONResponse(404)])

    with pytest.raises(APIError) as excinfo:
        client.get_standings("XX")

    assert excinfo.value.code == "http_404"
    assert excinfo.value.source == "football-data"
    assert len(session.calls) == 1


def test_connection_errors_become_network_error(sleeps):
    failures = [requests.exceptions.ConnectionError("refused") for _ in range(3)]
    client, session = make_client(failures)

    with pytest.raises(APIError) as excinfo:
        client.get_matches("PL")

    assert excinfo.value.code == "network_error"
    assert len(session.calls) == 3


def test_invalid_json_and_missing_blocks(sleeps):
    client, _session = make_client([FakeJSONResponse(200, None)])
    with pytest.raises(APIError) as excinfo:
        client.get_standings("PL")
    assert excinfo.value.code == "invalid_json"

    client, _session = make_client([FakeJSONResponse(200, {"competition": {}})])
    with pytest.raises(APIError) as excinfo:
        client.get_standings("PL")
    assert excinfo.value.code == "no_standings"

    client, _session = make_client([FakeJSONResponse(200, {"matches": None})])
    with pytest.raises(APIError) as excinfo:
        client.get_matches("PL")
    assert excinfo.value.code == "no_matches"


def test_no_key_sends_unauthenticated_request(sleeps):
    client, session = make_client([FakeJSONResponse(200, STANDINGS)], keys=())

    client.get_standings("PL")
    assert session.calls[0]["headers"] == {}


def test_provider_runs_client_asynchronously(sleeps):
    client, _session = make_client([FakeJSONResponse(200, STANDINGS), FakeJSONResponse(200, MATCHES)])
    provider = FootballDataProvider(client)

    async def fetch_both():
        return await provider.get_standings("PL"), await provider.get_matches("PL")

    assert asyncio.run(fetch_both()) == (STANDINGS, MATCHES)


def test_sanitize_error_message_hides_keys():
    message = "failed with X-Auth-Token: abc123 and apiKey=secret.value"
    sanitized = sanitize_error_message(message)
    assert "abc123" not in sanitized
    assert "secret.value" not in sanitized


def test_retry_after_wait_is_capped(sleeps, monkeypatch):
    monkeypatch.setattr(football_data_api, "MAX_RETRY_AFTER", 10)
    client, _session = make_client(
        [FakeJSONResponse(429, headers={"Retry-After": "600"}), FakeJSONResponse(200, STANDINGS)]
    )

    assert client.get_standings("PL") == STANDINGS
    assert 10 in sleeps
    assert 600 not in sleeps


def test_missing_key_warning_is_emitted_once(sleeps, caplog):
    client, _session = make_client(
        [FakeJSONResponse(200, STANDINGS), FakeJSONResponse(200, MATCHES)], keys=()
    )
    propagate_original = football_data_api.logger.propagate
    football_data_api.logger.propagate = True

    try:
        with caplog.at_level(logging.WARNING, logger=football_data_api.logger.name):
            client.get_standings("PL")
            client.get_matches("PL")
    finally:
        football_data_api.logger.propagate = propagate_original

    warnings = [r for r in caplog.records if "No FOOTBALL_DATA_API_KEY" in r.getMessage()]
    assert len(warnings) == 1
