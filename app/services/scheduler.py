# app/services/scheduler.py
"""
Weekly refresh of champions and current-season race winners.

``run_refresh`` is best effort: each step is caught and logged on its own, so
a failing champions walk never stops the race-winner refresh, and nothing
propagates to the background thread.
"""
from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.services.cache import CacheService, champions_key, race_winners_key
from app.services.champions import ChampionsService
from app.services.http_client import RateLimitedFetcher
from app.services.race_winners import RaceWinnersService
from app.services.repository import ChampionsRepository
from app.services.year_walker import current_year, year_range

logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class RefreshState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class RefreshScheduler:
    def __init__(
        self,
        settings: Settings,
        session_factory: Callable[[], Session],
        cache: CacheService,
        fetcher_factory: Optional[Callable[[], RateLimitedFetcher]] = None,
    ):
        self.settings = settings
        self.session_factory = session_factory
        self.cache = cache
        self.fetcher_factory = fetcher_factory or (lambda: RateLimitedFetcher.from_settings(settings))

        self.state = RefreshState.IDLE
        self.last_run_started: Optional[datetime] = None
        self.last_run_finished: Optional[datetime] = None
        self.last_run_status: Optional[str] = None

        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def schedule_description(self) -> str:
        day = WEEKDAYS[self.settings.refresh_weekday % 7]
        return f"Every {day} at {self.settings.refresh_hour:02d}:{self.settings.refresh_minute:02d} UTC"

    def next_scheduled_run(self, now: Optional[datetime] = None) -> datetime:
        """Next weekday/time strictly after ``now``; landing exactly on it rolls to next week."""
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        days_ahead = (self.settings.refresh_weekday - now.weekday()) % 7
        candidate = (now + timedelta(days=days_ahead)).replace(
            hour=self.settings.refresh_hour,
            minute=self.settings.refresh_minute,
            second=0,
            microsecond=0,
        )
        if candidate <= now:
            candidate += timedelta(days=7)
        return candidate

    # -----------------------
    # Refresh job
    # -----------------------
    def run_refresh(self) -> bool:
        """Run one refresh. Returns False without doing anything if one is already running."""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Refresh already running; ignoring trigger")
            return False

        self.state = RefreshState.RUNNING
        self.last_run_started = datetime.now(timezone.utc)
        failures = 0
        logger.info("Starting F1 data refresh")
        try:
            self._clear_cache()
            fetcher = self.fetcher_factory()
            with self.session_factory() as db:
                repository = ChampionsRepository(db)

                try:
                    champions = ChampionsService(repository, self.settings, fetcher, self.cache).get_champions(
                        force_refresh=True
                    )
                    logger.info("Refreshed %d champion records", len(champions))
                except Exception as e:
                    failures += 1
                    db.rollback()
                    logger.exception("Failed to refresh champions: %s", e)

                year = current_year()
                try:
                    winners = RaceWinnersService(repository, self.settings, fetcher, self.cache).get_race_winners(
                        year, force_refresh=True
                    )
                    logger.info("Refreshed %d race winners for %s", len(winners), year)
                except Exception as e:
                    failures += 1
                    db.rollback()
                    logger.exception("Failed to refresh race winners for %s: %s", year, e)
        except Exception as e:
            failures += 1
            logger.exception("F1 data refresh aborted: %s", e)
        finally:
            self.last_run_status = "success" if failures == 0 else "partial_failure"
            self.last_run_finished = datetime.now(timezone.utc)
            self.state = RefreshState.IDLE
            self._run_lock.release()

        logger.info("F1 data refresh finished: %s", self.last_run_status)
        return True

    def _clear_cache(self) -> None:
        self.cache.delete(champions_key())
        start = min(self.settings.gp_start_year, current_year())
        for year in year_range(start):
            self.cache.delete(race_winners_key(year))

    # -----------------------
    # Background thread
    # -----------------------
    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="f1-refresh", daemon=True)
        self._thread.start()
        logger.info("Refresh scheduler started; next run %s", self.next_scheduled_run().isoformat())

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        target = self.next_scheduled_run()
        while not self._stop.is_set():
            wait = (target - datetime.now(timezone.utc)).total_seconds()
            if self._stop.wait(max(0.0, wait)):
                break
            if datetime.now(timezone.utc) < target:
                # woke before the wall clock reached the slot
                continue
            self.run_refresh()
            target = self.next_scheduled_run(target)
