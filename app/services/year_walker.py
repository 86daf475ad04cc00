# app/services/year_walker.py
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar

from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# First FIA Formula One World Championship season
MIN_VALID_YEAR = 1950

CHAMPION_STANDINGS_PATH = "{year}/driverstandings/1.json"
RACE_RESULTS_PATH = "{year}/results/1.json"


def current_year() -> int:
    return datetime.now(timezone.utc).year


def validate_start_year(year: int, label: str = "GP_START_YEAR") -> int:
    """Reject years outside [1950, current year] before anything touches the network."""
    if year < MIN_VALID_YEAR:
        raise ConfigurationError(
            f"{label} must be {MIN_VALID_YEAR} or later. "
            f"The Formula 1 World Championship started in {MIN_VALID_YEAR}."
        )
    this_year = current_year()
    if year > this_year:
        raise ConfigurationError(f"{label} cannot be greater than current year ({this_year}).")
    return year


def validate_base_url(base_url: Optional[str]) -> str:
    if not base_url or not base_url.strip():
        raise ConfigurationError("Upstream base URL (ERGAST_URL) is not configured")
    return base_url.strip().rstrip("/")


def year_range(start_year: int, end_year: Optional[int] = None) -> range:
    return range(start_year, (end_year or current_year()) + 1)


def build_year_url(base_url: str, path_template: str, year: int) -> str:
    return f"{base_url.rstrip('/')}/{path_template.format(year=year)}"


def walk_years(
    base_url: Optional[str],
    start_year: int,
    path_template: str,
    processor: Callable[[int, str], Optional[T]],
    *,
    end_year: Optional[int] = None,
    on_error: Optional[Callable[[int, Exception], None]] = None,
) -> List[T]:
    """
    Run ``processor(year, url)`` for every year from ``start_year`` to
    ``end_year`` (default: current year), one at a time, in ascending order.

    ``None`` results are skipped. A failure in one year is logged and the walk
    moves on; only invalid configuration aborts it, and that happens before
    the first request.
    """
    base = validate_base_url(base_url)
    validate_start_year(start_year)
    if end_year is not None:
        validate_start_year(end_year, label="end year")

    years = year_range(start_year, end_year)
    results: List[T] = []
    for position, year in enumerate(years, start=1):
        url = build_year_url(base, path_template, year)
        logger.info("Processing %s (%d/%d)", year, position, len(years))
        try:
            result = processor(year, url)
        except Exception as e:
            logger.error("Error processing %s: %s", year, e)
            if on_error:
                on_error(year, e)
            continue
        if result is not None:
            results.append(result)

    return results
