# app/api/deps.py
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, settings
from app.db.session import SessionLocal, get_db
from app.services.cache import CacheService
from app.services.champions import ChampionsService
from app.services.http_client import RateLimitedFetcher
from app.services.race_winners import RaceWinnersService
from app.services.repository import ChampionsRepository
from app.services.scheduler import RefreshScheduler


def get_settings() -> Settings:
    return settings

@lru_cache
def get_cache() -> CacheService:
    return CacheService.from_url(settings.cache_url)

@lru_cache
def get_fetcher() -> RateLimitedFetcher:
    return RateLimitedFetcher.from_settings(settings)

@lru_cache
def get_scheduler() -> RefreshScheduler:
    return RefreshScheduler(settings, SessionLocal, get_cache())

def get_repository(db: Session = Depends(get_db)) -> ChampionsRepository:
    return ChampionsRepository(db)

def get_champions_service(
    repository: ChampionsRepository = Depends(get_repository),
    cfg: Settings = Depends(get_settings),
    fetcher: RateLimitedFetcher = Depends(get_fetcher),
    cache: CacheService = Depends(get_cache),
) -> ChampionsService:
    return ChampionsService(repository, cfg, fetcher, cache)

def get_race_winners_service(
    repository: ChampionsRepository = Depends(get_repository),
    cfg: Settings = Depends(get_settings),
    fetcher: RateLimitedFetcher = Depends(get_fetcher),
    cache: CacheService = Depends(get_cache),
) -> RaceWinnersService:
    return RaceWinnersService(repository, cfg, fetcher, cache)
