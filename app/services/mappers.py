# app/services/mappers.py
"""
Flatten upstream (Ergast-format) payloads into Season / RaceWinner records.

The upstream schema makes almost every level optional, so these never raise:
a missing or malformed segment degrades to ``''``. Deciding whether a record
is usable (non-empty season, race present) is left to the caller.
"""
from typing import Any, List

from app.schemas.champions import Season
from app.schemas.races import RaceWinner


def _dig(obj: Any, *path):
    """Follow dict keys / list indexes, returning None on the first miss."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or not 0 <= step < len(obj):
                return None
        elif not isinstance(obj, dict):
            return None
        obj = obj[step] if isinstance(step, int) else obj.get(step)
        if obj is None:
            return None
    return obj


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def map_champion(payload: Any) -> Season:
    table = _dig(payload, "MRData", "StandingsTable")
    driver = _dig(table, "StandingsLists", 0, "DriverStandings", 0, "Driver")
    return Season(
        season=_text(_dig(table, "season")),
        given_name=_text(_dig(driver, "givenName")),
        family_name=_text(_dig(driver, "familyName")),
        driver_id=_text(_dig(driver, "driverId")),
    )


def map_race(payload: Any, index: int) -> RaceWinner:
    race = _dig(payload, "MRData", "RaceTable", "Races", index)
    if not isinstance(race, dict):
        return RaceWinner()

    driver = _dig(race, "Results", 0, "Driver")
    return RaceWinner(
        round=_text(race.get("round")),
        gp_name=_text(race.get("raceName")),
        winner_id=_text(_dig(driver, "driverId")),
        winner_given_name=_text(_dig(driver, "givenName")),
        winner_family_name=_text(_dig(driver, "familyName")),
    )


def map_races(payload: Any) -> List[RaceWinner]:
    races = _dig(payload, "MRData", "RaceTable", "Races")
    if not isinstance(races, list):
        return []
    return [map_race(payload, i) for i in range(len(races))]
