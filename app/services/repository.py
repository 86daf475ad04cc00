# app/services/repository.py
import logging
from typing import List, Optional

from sqlalchemy import Integer, cast, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import DataQualityError
from app.models.f1 import Champion, Driver, RaceWinner as RaceWinnerRow
from app.schemas.champions import Season
from app.schemas.races import RaceWinner

logger = logging.getLogger(__name__)

_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class ChampionsRepository:
    """Natural-key upserts and ordered reads for champions and race winners."""

    def __init__(self, db: Session):
        self.db = db

    # -----------------------
    # Writes
    # -----------------------
    def upsert_champion(self, record: Season) -> Optional[Season]:
        """Insert/update the driver and the season's champion. Returns the stored record, or None if dropped."""
        try:
            clean = Season(
                season=security.sanitize_season(record.season),
                driver_id=security.sanitize_driver_id(record.driver_id),
                given_name=security.sanitize_name("givenName", record.given_name),
                family_name=security.sanitize_name("familyName", record.family_name),
            )
        except DataQualityError as e:
            logger.warning("[SECURITY] Dropping champion record for season %r: %s", record.season, e)
            return None

        self._upsert_driver(clean.driver_id, clean.given_name, clean.family_name)
        self._upsert(
            Champion,
            {"season": clean.season, "driver_id": clean.driver_id},
            keys=["season"],
        )
        self.db.commit()
        return clean

    def upsert_race_result(self, season: str, record: RaceWinner) -> Optional[RaceWinner]:
        """Insert/update one (season, round) winner. Returns the stored record, or None if dropped."""
        try:
            season = security.sanitize_season(season)
            clean = RaceWinner(
                round=security.sanitize_round(record.round),
                gp_name=security.sanitize_gp_name(record.gp_name),
                winner_id=security.sanitize_driver_id(record.winner_id),
                winner_given_name=security.sanitize_name("winnerGivenName", record.winner_given_name),
                winner_family_name=security.sanitize_name("winnerFamilyName", record.winner_family_name),
            )
        except DataQualityError as e:
            logger.warning(
                "[SECURITY] Dropping race result %s round %r: %s", season, record.round, e
            )
            return None

        self._upsert_driver(clean.winner_id, clean.winner_given_name, clean.winner_family_name)
        self._upsert(
            RaceWinnerRow,
            {"season": season, "round": clean.round, "gp_name": clean.gp_name, "driver_id": clean.winner_id},
            keys=["season", "round"],
        )
        self.db.commit()
        return clean

    def _upsert_driver(self, driver_id: str, given_name: str, family_name: str) -> None:
        self._upsert(
            Driver,
            {"driver_id": driver_id, "given_name": given_name, "family_name": family_name},
            keys=["driver_id"],
        )

    def _upsert(self, model, values: dict, keys: List[str]) -> None:
        """INSERT ... ON CONFLICT (keys) DO UPDATE; atomicity comes from the store's unique constraint."""
        insert = _INSERTS.get(self.db.get_bind().dialect.name)
        if insert is None:
            self._merge(model, values, keys)
            return
        stmt = insert(model).values(**values)
        update = {k: stmt.excluded[k] for k in values if k not in keys}
        self.db.execute(stmt.on_conflict_do_update(index_elements=keys, set_=update))

    def _merge(self, model, values: dict, keys: List[str]) -> None:
        row = self.db.query(model).filter_by(**{k: values[k] for k in keys}).first()
        if row is None:
            self.db.add(model(**values))
        else:
            for k, v in values.items():
                setattr(row, k, v)
        self.db.flush()

    # -----------------------
    # Reads
    # -----------------------
    def find_all_champions(self) -> List[Season]:
        rows = (
            self.db.query(Champion.season, Driver.driver_id, Driver.given_name, Driver.family_name)
            .join(Driver, Driver.driver_id == Champion.driver_id)
            .order_by(Champion.season.asc())
            .all()
        )
        return [
            Season(season=r.season, driver_id=r.driver_id, given_name=r.given_name, family_name=r.family_name)
            for r in rows
        ]

    def find_race_results(self, year) -> List[RaceWinner]:
        rows = (
            self.db.query(RaceWinnerRow.round, RaceWinnerRow.gp_name, Driver.driver_id,
                          Driver.given_name, Driver.family_name)
            .join(Driver, Driver.driver_id == RaceWinnerRow.driver_id)
            .filter(RaceWinnerRow.season == str(year))
            .order_by(cast(RaceWinnerRow.round, Integer).asc())
            .all()
        )
        return [
            RaceWinner(
                round=r.round,
                gp_name=r.gp_name,
                winner_id=r.driver_id,
                winner_given_name=r.given_name,
                winner_family_name=r.family_name,
            )
            for r in rows
        ]

    def has_champions(self) -> bool:
        return (self.db.query(func.count(Champion.id)).scalar() or 0) > 0

    def has_race_results(self, year) -> bool:
        count = self.db.query(func.count(RaceWinnerRow.id)).filter(RaceWinnerRow.season == str(year)).scalar()
        return (count or 0) > 0
