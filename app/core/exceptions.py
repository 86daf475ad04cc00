"""
Exception hierarchy for the champions API.

Call sites use the type to decide what happens next: configuration errors go
back to the client as a 400, upstream errors are either skipped per year or
propagated, and data-quality errors never leave the persistence layer.
"""


class F1ChampionsError(Exception):
    """Base class for all application errors."""


class ConfigurationError(F1ChampionsError):
    """
    Raised for missing or out-of-range configuration and request parameters
    (no upstream base URL, a year before 1950 or after the current year).

    Surfaced to the caller as a client error and never retried.
    """


class UpstreamError(F1ChampionsError):
    """Raised when the upstream statistics API fails with a terminal error."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RateLimitedError(UpstreamError):
    """
    Raised for an HTTP 429 from upstream.

    Only seen inside the fetcher's retry loop; ``retry_after`` is the number of
    seconds to wait before the next attempt.
    """

    def __init__(self, url: str, retry_after: int):
        super().__init__(f"Rate limited by upstream for {url}", url=url, status_code=429)
        self.retry_after = retry_after


class UpstreamRateLimitError(UpstreamError):
    """Raised when upstream keeps answering 429 past the configured attempt cap."""


class DataQualityError(F1ChampionsError):
    """Raised when a record fails sanitization or the content-safety check."""
