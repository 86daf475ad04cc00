from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from app.db.base import Base


class Driver(Base):
    __tablename__ = "drivers"
    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(String(30), nullable=False, unique=True)   # upstream slug, e.g. "hamilton"
    given_name = Column(String(50), nullable=False)
    family_name = Column(String(50), nullable=False)
    championships = relationship("Champion", back_populates="driver")
    wins = relationship("RaceWinner", back_populates="driver")

class Champion(Base):
    __tablename__ = "champions"
    id = Column(Integer, primary_key=True, index=True)
    season = Column(String(4), nullable=False, unique=True)
    driver_id = Column(String(30), ForeignKey("drivers.driver_id"), nullable=False)
    driver = relationship("Driver", back_populates="championships")

class RaceWinner(Base):
    __tablename__ = "race_winners"
    __table_args__ = (
        UniqueConstraint("season", "round", name="unique_race_winners_season_round"),
        Index("ix_race_winners_season", "season"),
    )
    id = Column(Integer, primary_key=True, index=True)
    season = Column(String(4), nullable=False)
    round = Column(String(2), nullable=False)
    gp_name = Column(String(100), nullable=False)
    driver_id = Column(String(30), ForeignKey("drivers.driver_id"), nullable=False)
    driver = relationship("Driver", back_populates="wins")
