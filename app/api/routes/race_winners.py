from typing import List

from fastapi import APIRouter, Depends, Path

from app.api.deps import get_race_winners_service
from app.schemas.races import RaceWinner
from app.services.race_winners import RaceWinnersService

router = APIRouter()

@router.get("/{year}", response_model=List[RaceWinner])
def race_winners(
    year: int = Path(..., description="Season year, 1950 to the current year", examples=[2021]),
    service: RaceWinnersService = Depends(get_race_winners_service),
):
    return service.get_race_winners(year)
