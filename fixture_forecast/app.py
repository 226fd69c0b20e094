import asyncio
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Optional

from flask import Flask, current_app, request

from .app_utils import make_error, make_ok
from .config import setup_logger
from .constants import MODE_FIXTURES, MODE_STANDINGS
from .football_data_api import FootballDataProvider
from .logo_resolver import crest_candidates
from .orchestrator import ForecastSession

logger = setup_logger(__name__)

SESSION_EXTENSION = "forecast_session"

ResponseBuilder = Callable[[ForecastSession], tuple]


def _respond(league: str, mode: str, build: ResponseBuilder) -> tuple:
    """Load `league` in `mode` and build the response from the session.

    All requests share one session, so loading and reading it both happen
    under the session lock.
    """
    session: ForecastSession = current_app.extensions[SESSION_EXTENSION]
    with current_app.extensions[SESSION_EXTENSION + "_lock"]:
        try:
            asyncio.run(session.show(league, mode))
        except ValueError as exc:
            return make_error({"code": "invalid_request", "message": str(exc)}, str(exc), 400)
        session.set_query(request.args.get("q", ""))
        return build(session)


def _standings_response(session: ForecastSession) -> tuple:
    if session.error is not None:
        return make_error(session.error, "Failed to load standings.", 502)

    rows = []
    for entry in session.standings_rows():
        row: dict[str, Any] = entry.to_dict()
        row["crests"] = crest_candidates(entry.team)
        rows.append(row)
    return make_ok(
        {"league": session.league, "status": session.status, "table": rows},
        "No teams match your search." if not rows else "success",
    )


def _fixtures_response(session: ForecastSession) -> tuple:
    if session.error is not None and not session.fixtures:
        return make_error(session.error, "Failed to load fixtures.", 502)

    records = []
    for prediction in session.predictions():
        record = prediction.to_dict()
        record["fixture"]["homeTeam"]["crests"] = crest_candidates(prediction.fixture.home_team)
        record["fixture"]["awayTeam"]["crests"] = crest_candidates(prediction.fixture.away_team)
        records.append(record)
    return make_ok(
        {"league": session.league, "status": session.status, "predictions": records},
        "No upcoming (unplayed) fixtures match your search." if not records else "success",
    )


def create_app(
    session_factory: Optional[Callable[[], ForecastSession]] = None,
) -> Flask:
    """Build the JSON app; one forecast session lives as long as the app."""

    app = Flask(__name__)
    factory = session_factory or (lambda: ForecastSession(FootballDataProvider()))
    app.extensions[SESSION_EXTENSION] = factory()
    app.extensions[SESSION_EXTENSION + "_lock"] = Lock()

    @app.route("/health", methods=["GET"])
    def health():
        ts = datetime.now(timezone.utc).isoformat()
        return make_ok({"ok": True, "ts": ts}, "OK")

    @app.route("/standings/<league>", methods=["GET"])
    def standings(league: str):
        return _respond(league, MODE_STANDINGS, _standings_response)

    @app.route("/fixtures/<league>", methods=["GET"])
    def fixtures(league: str):
        return _respond(league, MODE_FIXTURES, _fixtures_response)

    logger.info("fixture_forecast app ready")
    return app
