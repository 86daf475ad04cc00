# app/services/race_winners.py
import logging
from typing import List, Optional

from app.core.config import Settings
from app.schemas.races import RaceWinner
from app.services.cache import CacheService, race_winners_key
from app.services.http_client import RateLimitedFetcher
from app.services.mappers import map_races
from app.services.repository import ChampionsRepository
from app.services.year_walker import RACE_RESULTS_PATH, build_year_url, validate_base_url, validate_start_year

logger = logging.getLogger(__name__)


class RaceWinnersService:
    """Winners of every round in one season, store first, upstream on a miss."""

    def __init__(
        self,
        repository: ChampionsRepository,
        settings: Settings,
        fetcher: RateLimitedFetcher,
        cache: Optional[CacheService] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.fetcher = fetcher
        self.cache = cache or CacheService(None)

    def get_race_winners(self, year: int, force_refresh: bool = False) -> List[RaceWinner]:
        validate_start_year(year, label="Year")
        key = race_winners_key(year)

        if not force_refresh:
            cached = self.cache.get(key)
            if cached:
                logger.info("Returning race winners for %s from response cache", year)
                return [RaceWinner.model_validate(r) for r in cached]

            if self.repository.has_race_results(year):
                logger.info("Loading race winners for %s from database", year)
                winners = self.repository.find_race_results(year)
                self._remember(year, winners)
                return winners

        base_url = validate_base_url(self.settings.ergast_url)
        logger.info(
            "%s race winners for %s from upstream",
            "Force refreshing" if force_refresh else "Fetching",
            year,
        )
        # Single unit of work: upstream errors propagate to the caller
        payload = self.fetcher.fetch(build_year_url(base_url, RACE_RESULTS_PATH, year))

        winners: List[RaceWinner] = []
        for race in map_races(payload):
            if race.round is None:
                continue
            if not race.winner_id:
                logger.warning("Round %r of %s has no winner yet; skipping", race.round, year)
                continue
            stored = self.repository.upsert_race_result(str(year), race)
            if stored is not None:
                winners.append(stored)

        winners.sort(key=lambda r: int(r.round))
        self._remember(year, winners)
        return winners

    def _remember(self, year: int, winners: List[RaceWinner]) -> None:
        if winners:
            self.cache.set(
                race_winners_key(year),
                [w.model_dump(by_alias=True) for w in winners],
                self.settings.race_winners_cache_ttl,
            )
