import argparse
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.services.http_client import RateLimitedFetcher
from app.services.champions import ChampionsService
from app.services.race_winners import RaceWinnersService
from app.services.repository import ChampionsRepository
from app.services.year_walker import current_year

# -----------------------
# Strict env-based config
# -----------------------
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

ERGAST_URL = os.getenv("ERGAST_URL")
if not ERGAST_URL:
    raise RuntimeError("ERGAST_URL is not set.")


def parse_args():
    p = argparse.ArgumentParser(description="Seed season champions (and optionally race winners) from upstream.")
    p.add_argument("--start-year", type=int, default=None, help="Override GP_START_YEAR")
    p.add_argument("--force", action="store_true", help="Re-fetch even if champions are already stored")
    p.add_argument("--race-winners", action="store_true", help="Also seed race winners for every season")
    return p.parse_args()


def main():
    args = parse_args()
    overrides = {"database_url": DATABASE_URL, "ergast_url": ERGAST_URL}
    if args.start_year is not None:
        overrides["gp_start_year"] = args.start_year
    settings = Settings(**overrides)

    engine = create_engine(DATABASE_URL, future=True)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    fetcher = RateLimitedFetcher.from_settings(settings)

    print(f"Seeding champions {settings.gp_start_year}..{current_year()} from {ERGAST_URL}")
    with SessionLocal() as session:
        repository = ChampionsRepository(session)
        champions = ChampionsService(repository, settings, fetcher).get_champions(force_refresh=args.force)
        for c in champions:
            print(f"  {c.season}: {c.given_name} {c.family_name} ({c.driver_id})")
        print(f"✅ {len(champions)} champions stored")

        if args.race_winners:
            winners_service = RaceWinnersService(repository, settings, fetcher)
            for year in range(settings.gp_start_year, current_year() + 1):
                try:
                    winners = winners_service.get_race_winners(year, force_refresh=args.force)
                    print(f"✅ {year}: {len(winners)} race winners stored")
                except Exception as e:
                    session.rollback()
                    print(f"⚠️  {year}: skipping → {e}")


if __name__ == "__main__":
    main()
