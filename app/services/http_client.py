# app/services/http_client.py
"""
Rate-limited access to the upstream statistics API.

Every call is blocking and strictly sequential: after each successful GET the
fetcher cools down for the number of seconds the upstream advertises
(``retry-after`` / ``x-ratelimit-reset``), or for a short default delay.
HTTP 429 responses are retried with the advertised back-off, up to a fixed
number of attempts.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

import requests
from requests import RequestException
from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from app.core.config import Settings
from app.core.exceptions import RateLimitedError, UpstreamError, UpstreamRateLimitError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "F1-Champions-API/1.0",
    "Accept": "application/json",
}
RATE_LIMIT_HEADERS = ("retry-after", "x-ratelimit-reset")
DEFAULT_RETRY_AFTER = 1


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    return session


def parse_retry_after(headers) -> int | None:
    """Whole seconds from the first rate-limit header present, or None."""
    if not headers:
        return None
    for name in RATE_LIMIT_HEADERS:
        value = headers.get(name)
        if value in (None, ""):
            continue
        try:
            return max(0, int(str(value).strip()))
        except ValueError:
            continue
    return None


def _wait_for_retry_after(retry_state) -> float:
    exc = retry_state.outcome.exception()
    return float(getattr(exc, "retry_after", DEFAULT_RETRY_AFTER))


class RateLimitedFetcher:
    """Blocking JSON GET with post-request cool-down and capped 429 retries."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        default_delay: float = 0.25,
        max_attempts: int = 10,
        timeout: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session or create_session()
        self.default_delay = default_delay
        self.max_attempts = max(1, max_attempts)
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session | None = None) -> "RateLimitedFetcher":
        return cls(
            session,
            default_delay=settings.rate_limit_default_delay,
            max_attempts=settings.rate_limit_max_attempts,
            timeout=settings.request_timeout,
        )

    def fetch(self, url: str) -> Any:
        """
        GET ``url`` and return the decoded JSON body.

        Raises:
            UpstreamRateLimitError: upstream answered 429 on every attempt
            UpstreamError: any other HTTP error, transport failure or non-JSON body
        """
        retryer = Retrying(
            retry=retry_if_exception_type(RateLimitedError),
            stop=stop_after_attempt(self.max_attempts),
            wait=_wait_for_retry_after,
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        try:
            return retryer(self._get_once, url)
        except RetryError as exc:
            raise UpstreamRateLimitError(
                f"Still rate limited after {self.max_attempts} attempts: {url}",
                url=url,
                status_code=429,
            ) from exc

    def _get_once(self, url: str) -> Any:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except RequestException as e:
            raise UpstreamError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code == 429:
            retry_after = parse_retry_after(response.headers)
            raise RateLimitedError(url, DEFAULT_RETRY_AFTER if retry_after is None else retry_after)
        if response.status_code >= 400:
            raise UpstreamError(
                f"Upstream returned HTTP {response.status_code} for {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(f"Upstream returned a non-JSON body for {url}", url=url) from e

        cool_down = parse_retry_after(response.headers)
        self._sleep(self.default_delay if cool_down is None else cool_down)
        return body
