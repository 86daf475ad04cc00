# app/services/champions.py
import logging
from typing import List, Optional

from app.core.config import Settings
from app.schemas.champions import Season
from app.services.cache import CacheService, champions_key
from app.services.http_client import RateLimitedFetcher
from app.services.mappers import map_champion
from app.services.repository import ChampionsRepository
from app.services.year_walker import CHAMPION_STANDINGS_PATH, validate_base_url, walk_years

logger = logging.getLogger(__name__)


class ChampionsService:
    """Season champions, served from the store and fetched from upstream only on a miss."""

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

    def get_champions(self, force_refresh: bool = False) -> List[Season]:
        key = champions_key()

        if not force_refresh:
            cached = self.cache.get(key)
            if cached:
                logger.info("Returning champions from response cache")
                return [Season.model_validate(c) for c in cached]

            if self.repository.has_champions():
                champions = self.repository.find_all_champions()
                self._remember(champions)
                return champions

        base_url = validate_base_url(self.settings.ergast_url)
        start_year = self.settings.gp_start_year
        logger.info(
            "%s champions from upstream starting %s",
            "Force refreshing" if force_refresh else "Fetching",
            start_year,
        )
        seasons = walk_years(base_url, start_year, CHAMPION_STANDINGS_PATH, self._ingest_season)
        self._remember(self.repository.find_all_champions())
        return seasons

    def _ingest_season(self, year: int, url: str) -> Optional[Season]:
        record = map_champion(self.fetcher.fetch(url))
        if not record.season:
            logger.warning("No champion standings in upstream response for %s", year)
            return None
        return self.repository.upsert_champion(record)

    def _remember(self, champions: List[Season]) -> None:
        if champions:
            self.cache.set(
                champions_key(),
                [c.model_dump(by_alias=True) for c in champions],
                self.settings.champions_cache_ttl,
            )
