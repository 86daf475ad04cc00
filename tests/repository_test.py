from app.models.f1 import Champion, Driver, RaceWinner as RaceWinnerRow
from app.schemas.champions import Season
from app.schemas.races import RaceWinner


def season(year, driver_id="hamilton", given="Lewis", family="Hamilton"):
    return Season(season=str(year), driver_id=driver_id, given_name=given, family_name=family)


def race(rnd, name="Bahrain Grand Prix", driver_id="hamilton", given="Lewis", family="Hamilton"):
    return RaceWinner(round=str(rnd), gp_name=name, winner_id=driver_id,
                      winner_given_name=given, winner_family_name=family)


def test_has_champions(repository):
    assert repository.has_champions() is False
    repository.upsert_champion(season(2020))
    assert repository.has_champions() is True


def test_upsert_champion_is_idempotent(repository, db):
    repository.upsert_champion(season(2020))
    repository.upsert_champion(season(2020))
    assert db.query(Champion).count() == 1
    assert db.query(Driver).count() == 1
    assert [c.model_dump() for c in repository.find_all_champions()] == [season(2020).model_dump()]


def test_upsert_champion_reassigns_driver(repository, db):
    repository.upsert_champion(season(2021))
    repository.upsert_champion(season(2021, "max_verstappen", "Max", "Verstappen"))
    champions = repository.find_all_champions()
    assert len(champions) == 1
    assert champions[0].driver_id == "max_verstappen"
    assert db.query(Driver).count() == 2


def test_driver_name_change_overwrites(repository, db):
    repository.upsert_champion(season(2007, "raikkonen", "Kimi", "Raikkonen"))
    repository.upsert_champion(season(2007, "raikkonen", "Kimi", "Räikkönen"))
    assert db.query(Driver).one().family_name == "Räikkönen"


def test_champions_ordered_by_season(repository):
    for year in (2022, 2019, 2020):
        repository.upsert_champion(season(year))
    assert [c.season for c in repository.find_all_champions()] == ["2019", "2020", "2022"]


def test_upsert_champion_sanitizes(repository):
    stored = repository.upsert_champion(season(2020, "  Hamilton ", " Lewis  ", "Hamilton "))
    assert stored.driver_id == "hamilton"
    assert stored.given_name == "Lewis"
    assert stored.family_name == "Hamilton"


def test_poisoned_champion_is_dropped(repository, db):
    assert repository.upsert_champion(season(2020, given="<script>alert(1)</script>")) is None
    assert repository.upsert_champion(season(2020, driver_id="x; DROP TABLE drivers")) is None
    assert repository.upsert_champion(Season()) is None
    assert db.query(Champion).count() == 0
    assert db.query(Driver).count() == 0


def test_race_results_idempotent_and_ordered_by_round(repository, db):
    for rnd in (10, 2, 1):
        repository.upsert_race_result("2021", race(rnd, name=f"Round {rnd} Grand Prix"))
    repository.upsert_race_result("2021", race(2, name="Round 2 Grand Prix"))
    assert db.query(RaceWinnerRow).count() == 3
    assert [r.round for r in repository.find_race_results(2021)] == ["1", "2", "10"]


def test_race_result_update_overwrites_non_key_fields(repository):
    repository.upsert_race_result("2021", race(1))
    repository.upsert_race_result("2021", race(1, name="Sakhir Grand Prix", driver_id="perez",
                                              given="Sergio", family="Perez"))
    [stored] = repository.find_race_results("2021")
    assert stored.gp_name == "Sakhir Grand Prix"
    assert stored.winner_id == "perez"
    assert stored.winner_given_name == "Sergio"


def test_race_results_filtered_by_year(repository):
    repository.upsert_race_result("2020", race(1))
    repository.upsert_race_result("2021", race(1))
    repository.upsert_race_result("2021", race(2))
    assert repository.has_race_results(2020)
    assert not repository.has_race_results(2019)
    assert len(repository.find_race_results(2021)) == 2


def test_poisoned_race_result_is_dropped(repository, db):
    assert repository.upsert_race_result("2021", race(1, name="GP'; DELETE FROM drivers --")) is None
    assert repository.upsert_race_result("2021", race(123)) is None
    assert repository.upsert_race_result("21", race(1)) is None
    assert db.query(RaceWinnerRow).count() == 0
