import pytest

from app.core.exceptions import ConfigurationError, UpstreamError
from app.services.year_walker import (
    CHAMPION_STANDINGS_PATH,
    build_year_url,
    current_year,
    validate_base_url,
    validate_start_year,
    walk_years,
)

BASE = "https://api.test.com/ergast/f1"


def test_start_year_before_1950_rejected():
    with pytest.raises(ConfigurationError, match="must be 1950 or later"):
        validate_start_year(1949)


def test_start_year_in_future_rejected():
    with pytest.raises(ConfigurationError, match="cannot be greater than current year"):
        validate_start_year(current_year() + 1)


def test_start_year_bounds_inclusive():
    assert validate_start_year(1950) == 1950
    assert validate_start_year(current_year()) == current_year()


def test_missing_base_url_rejected():
    with pytest.raises(ConfigurationError):
        validate_base_url(None)
    with pytest.raises(ConfigurationError):
        validate_base_url("  ")
    assert validate_base_url("https://x/f1/") == "https://x/f1"


def test_build_year_url():
    assert build_year_url(BASE + "/", CHAMPION_STANDINGS_PATH, 2021) == f"{BASE}/2021/driverstandings/1.json"


def test_walk_rejects_bad_config_before_any_call():
    calls = []
    with pytest.raises(ConfigurationError):
        walk_years(BASE, 1949, CHAMPION_STANDINGS_PATH, lambda y, u: calls.append(y))
    with pytest.raises(ConfigurationError):
        walk_years(BASE, current_year() + 1, CHAMPION_STANDINGS_PATH, lambda y, u: calls.append(y))
    with pytest.raises(ConfigurationError):
        walk_years("", 2020, CHAMPION_STANDINGS_PATH, lambda y, u: calls.append(y))
    assert calls == []


def test_walk_boundaries_succeed():
    assert walk_years(BASE, current_year(), CHAMPION_STANDINGS_PATH, lambda y, u: y) == [current_year()]
    years = walk_years(BASE, 1950, CHAMPION_STANDINGS_PATH, lambda y, u: y)
    assert years[0] == 1950
    assert years[-1] == current_year()


def test_walk_is_ascending_and_builds_urls():
    seen = []

    def processor(year, url):
        seen.append(url)
        return year

    start = current_year() - 3
    assert walk_years(BASE, start, CHAMPION_STANDINGS_PATH, processor) == list(range(start, current_year() + 1))
    assert seen[0] == f"{BASE}/{start}/driverstandings/1.json"


def test_walk_continues_past_failures_and_skips_none():
    start = current_year() - 2
    errors = []

    def processor(year, url):
        if year == start:
            raise UpstreamError("HTTP 500", url=url, status_code=500)
        if year == start + 1:
            return None
        return f"record-{year}"

    results = walk_years(BASE, start, CHAMPION_STANDINGS_PATH, processor,
                         on_error=lambda year, exc: errors.append(year))
    assert results == [f"record-{start + 2}"]
    assert errors == [start]


def test_walk_end_year():
    assert walk_years(BASE, 2000, CHAMPION_STANDINGS_PATH, lambda y, u: y, end_year=2002) == [2000, 2001, 2002]
