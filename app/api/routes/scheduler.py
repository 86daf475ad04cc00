from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.deps import get_scheduler, get_settings
from app.core.config import Settings
from app.schemas.system import NextRunResponse, SchedulerStatus, TriggerResponse
from app.services.scheduler import RefreshScheduler

router = APIRouter()

def _iso(value):
    return value.isoformat() if value else None

@router.post("/trigger-update", response_model=TriggerResponse)
def trigger_update(scheduler: RefreshScheduler = Depends(get_scheduler)):
    """Run the weekly refresh now, synchronously."""
    started = scheduler.run_refresh()
    return {
        "message": f"F1 data update finished: {scheduler.last_run_status}" if started
        else "F1 data update already in progress",
        "started": started,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@router.get("/next-run", response_model=NextRunResponse)
def next_run(scheduler: RefreshScheduler = Depends(get_scheduler)):
    return {
        "next_run": scheduler.next_scheduled_run().isoformat(),
        "schedule": scheduler.schedule_description,
    }

@router.get("/status", response_model=SchedulerStatus)
def status(scheduler: RefreshScheduler = Depends(get_scheduler), cfg: Settings = Depends(get_settings)):
    return {
        "enabled": cfg.refresh_enabled,
        "state": scheduler.state.value,
        "next_run": scheduler.next_scheduled_run().isoformat(),
        "schedule": scheduler.schedule_description,
        "last_run_started": _iso(scheduler.last_run_started),
        "last_run_finished": _iso(scheduler.last_run_finished),
        "last_run_status": scheduler.last_run_status,
    }
