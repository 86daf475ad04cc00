from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_cache
from app.schemas.system import CacheCleared, CacheHealth, CacheStats
from app.services.cache import RACE_WINNERS_PREFIX, CacheService, champions_key, race_winners_key

router = APIRouter()

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _cleared(message: str, deleted: int):
    return {"message": message, "deleted": deleted, "timestamp": _now()}

@router.get("/health", response_model=CacheHealth)
def cache_health(cache: CacheService = Depends(get_cache)):
    if not cache.enabled:
        status = "disabled"
    else:
        status = "healthy" if cache.is_healthy() else "unhealthy"
    return {"status": status, "cache": "redis", "timestamp": _now()}

@router.get("/stats", response_model=CacheStats)
def cache_stats(cache: CacheService = Depends(get_cache)):
    return {**cache.stats(), "timestamp": _now()}

@router.delete("/champions", response_model=CacheCleared)
def clear_champions(cache: CacheService = Depends(get_cache)):
    return _cleared("Champions cache cleared", cache.delete(champions_key()))

@router.delete("/race-winners/{year}", response_model=CacheCleared)
def clear_race_winners_year(year: int, cache: CacheService = Depends(get_cache)):
    return _cleared(f"Race winners cache cleared for year {year}", cache.delete(race_winners_key(year)))

@router.delete("/race-winners", response_model=CacheCleared)
def clear_race_winners(cache: CacheService = Depends(get_cache)):
    return _cleared("All race winners cache cleared", cache.delete_pattern(f"{RACE_WINNERS_PREFIX}:*"))

@router.delete("/keys/{pattern}", response_model=CacheCleared)
def clear_pattern(pattern: str, cache: CacheService = Depends(get_cache)):
    """Delete keys matching a redis glob pattern, e.g. ``race_winners:20*``."""
    return _cleared(f"Cache keys matching {pattern!r} cleared", cache.delete_pattern(pattern))
