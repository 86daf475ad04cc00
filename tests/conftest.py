import pytest
from fakeredis import FakeRedis, FakeServer
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models.f1  # noqa: F401  registers tables on Base.metadata
from app.core.config import Settings
from app.db.base import Base
from app.services.cache import CacheService
from app.services.repository import ChampionsRepository
from app.services.year_walker import current_year

BASE_URL = "https://api.test.com/ergast/f1"


class FakeFetcher:
    """Stands in for RateLimitedFetcher: url -> payload (or exception to raise)."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        value = self.responses.get(url, {})
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        env="development",
        ergast_url=BASE_URL,
        gp_start_year=current_year() - 2,
        cache_url=None,
        refresh_enabled=False,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db):
    return ChampionsRepository(db)


@pytest.fixture
def cache():
    return CacheService(FakeRedis(server=FakeServer(), decode_responses=True))


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def champion_payload():
    def build(season, driver_id="hamilton", given="Lewis", family="Hamilton"):
        return {
            "MRData": {
                "StandingsTable": {
                    "season": str(season),
                    "StandingsLists": [
                        {
                            "season": str(season),
                            "DriverStandings": [
                                {
                                    "position": "1",
                                    "Driver": {
                                        "driverId": driver_id,
                                        "givenName": given,
                                        "familyName": family,
                                    },
                                }
                            ],
                        }
                    ],
                }
            }
        }
    return build


@pytest.fixture
def race_payload():
    def build(season, races):
        """races: iterable of (round, raceName, driverId, givenName, familyName)."""
        return {
            "MRData": {
                "RaceTable": {
                    "season": str(season),
                    "Races": [
                        {
                            "season": str(season),
                            "round": str(rnd),
                            "raceName": name,
                            "Results": [
                                {
                                    "position": "1",
                                    "Driver": {"driverId": did, "givenName": given, "familyName": family},
                                }
                            ],
                        }
                        for rnd, name, did, given, family in races
                    ],
                }
            }
        }
    return build
