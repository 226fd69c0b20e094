import pytest

from fixture_forecast.validators import coerce_int, optional_str, validate_league, validate_mode


@pytest.mark.parametrize("raw,expected", [("pl", "PL"), (" bl1 ", "BL1"), ("epl", "PL"), ("la liga", "PD"), ("UCL", "CL")])
def test_validate_league_normalizes(raw, expected):
    assert validate_league(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "xyz"])
def test_validate_league_rejects(raw):
    with pytest.raises(ValueError):
        validate_league(raw)


def test_validate_mode():
    assert validate_mode(" Fixtures ") == "fixtures"
    assert validate_mode("standings") == "standings"
    with pytest.raises(ValueError):
        validate_mode("table")


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0), (True, 0), ("7", 7), (7.9, 7), ("2.0", 2), ("abc", 0), (float("nan"), 0), (float("inf"), 0)],
)
def test_coerce_int(raw, expected):
    assert coerce_int(raw) == expected


def test_optional_str():
    assert optional_str("  x ") == "x"
    assert optional_str("  ") is None
    assert optional_str(None) is None
