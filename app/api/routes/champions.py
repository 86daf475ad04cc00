from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_champions_service
from app.schemas.champions import Season
from app.services.champions import ChampionsService

router = APIRouter()

@router.get("", response_model=List[Season])
def list_champions(service: ChampionsService = Depends(get_champions_service)):
    """World champion of every season from the configured start year, oldest first."""
    return service.get_champions()
