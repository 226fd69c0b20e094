import asyncio

from fixture_forecast.domain.contracts import Fixture, StandingsEntry, TeamRef
from fixture_forecast.search import Debouncer, filter_fixtures, filter_standings


def entry(position, name):
    return StandingsEntry(position=position, team=TeamRef(name=name))


def fixture(home, away, date):
    return Fixture.from_payload(
        {"homeTeam": {"name": home}, "awayTeam": {"name": away}, "utcDate": date, "status": "SCHEDULED"}
    )


def test_filter_standings_sorts_by_position():
    rows = [entry(3, "Chelsea FC"), entry(1, "Arsenal FC"), entry(2, "Aston Villa FC")]

    assert [e.position for e in filter_standings(rows)] == [1, 2, 3]
    assert [e.team.name for e in filter_standings(rows, "  A ")] == ["Arsenal FC", "Aston Villa FC", "Chelsea FC"]
    assert [e.team.name for e in filter_standings(rows, "villa")] == ["Aston Villa FC"]


def test_filter_fixtures_by_either_team_and_date():
    fixtures = [
        fixture("Chelsea FC", "Arsenal FC", "2025-10-20T19:00:00Z"),
        fixture("Everton FC", "Fulham FC", None),
        fixture("Arsenal FC", "Everton FC", "2025-10-18T14:00:00Z"),
    ]

    ordered = filter_fixtures(fixtures)
    assert [f.home_team.name for f in ordered] == ["Arsenal FC", "Chelsea FC", "Everton FC"]

    arsenal = filter_fixtures(fixtures, "arsenal")
    assert [f.home_team.name for f in arsenal] == ["Arsenal FC", "Chelsea FC"]
    assert filter_fixtures(fixtures, "spurs") == []


def test_debouncer_coalesces_calls():
    calls = []
    debouncer = Debouncer(calls.append, wait=0.01)

    async def scenario():
        debouncer.trigger("a")
        debouncer.trigger("ab")
        assert debouncer.pending
        await asyncio.sleep(0.05)
        debouncer.trigger("abc")
        debouncer.cancel()
        await asyncio.sleep(0.03)

    asyncio.run(scenario())

    assert calls == ["ab"]
    assert not debouncer.pending
