from app.services.mappers import map_champion, map_race, map_races


def test_map_champion_full_payload():
    payload = {"MRData": {"StandingsTable": {"season": "2021", "StandingsLists": [
        {"DriverStandings": [{"Driver": {"driverId": "hamilton", "givenName": "Lewis", "familyName": "Hamilton"}}]}
    ]}}}
    record = map_champion(payload)
    assert record.model_dump(by_alias=True) == {
        "season": "2021",
        "givenName": "Lewis",
        "familyName": "Hamilton",
        "driverId": "hamilton",
    }


def test_map_champion_empty_payload():
    record = map_champion({})
    assert record.model_dump(by_alias=True) == {"season": "", "givenName": "", "familyName": "", "driverId": ""}
    assert not record.season


def test_map_champion_season_without_standings():
    record = map_champion({"MRData": {"StandingsTable": {"season": "2026", "StandingsLists": []}}})
    assert record.season == "2026"
    assert record.driver_id == ""


def test_map_champion_tolerates_wrong_types():
    assert map_champion(None).season == ""
    assert map_champion([1, 2]).season == ""
    assert map_champion({"MRData": {"StandingsTable": {"StandingsLists": "oops"}}}).driver_id == ""


def test_map_race(race_payload):
    payload = race_payload(2021, [("1", "Bahrain Grand Prix", "hamilton", "Lewis", "Hamilton"),
                                  ("2", "Emilia Romagna Grand Prix", "max_verstappen", "Max", "Verstappen")])
    race = map_race(payload, 1)
    assert race.round == "2"
    assert race.gp_name == "Emilia Romagna Grand Prix"
    assert race.winner_id == "max_verstappen"
    assert race.winner_given_name == "Max"
    assert race.winner_family_name == "Verstappen"


def test_map_race_missing_index_is_all_none(race_payload):
    race = map_race(race_payload(2021, []), 0)
    assert race.model_dump() == {
        "round": None,
        "gp_name": None,
        "winner_id": None,
        "winner_given_name": None,
        "winner_family_name": None,
    }


def test_map_race_without_results_degrades_to_empty():
    payload = {"MRData": {"RaceTable": {"Races": [{"round": "5", "raceName": "Monaco Grand Prix"}]}}}
    race = map_race(payload, 0)
    assert race.round == "5"
    assert race.winner_id == ""


def test_map_races(race_payload):
    payload = race_payload(2008, [("1", "Australian Grand Prix", "hamilton", "Lewis", "Hamilton"),
                                  ("2", "Malaysian Grand Prix", "raikkonen", "Kimi", "Räikkönen")])
    races = map_races(payload)
    assert [r.round for r in races] == ["1", "2"]
    assert map_races({}) == []
    assert map_races({"MRData": {"RaceTable": {"Races": None}}}) == []
