from typing import Dict, Optional
from pydantic import BaseModel


class TriggerResponse(BaseModel):
    message: str
    started: bool
    timestamp: str

class NextRunResponse(BaseModel):
    next_run: str
    schedule: str
    timezone: str = "UTC"

class SchedulerStatus(BaseModel):
    enabled: bool
    state: str
    next_run: str
    schedule: str
    last_run_started: Optional[str] = None
    last_run_finished: Optional[str] = None
    last_run_status: Optional[str] = None

class CacheHealth(BaseModel):
    status: str
    cache: str
    timestamp: str

class CacheStats(BaseModel):
    enabled: bool
    total_keys: int = 0
    keys_by_prefix: Dict[str, int] = {}
    timestamp: str

class CacheCleared(BaseModel):
    message: str
    deleted: int
    timestamp: str
