from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RaceWinner(BaseModel):
    """Winner of one round. Fields are ``None`` when the race itself is missing upstream."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    round: Optional[str] = None
    gp_name: Optional[str] = None
    winner_id: Optional[str] = None
    winner_given_name: Optional[str] = None
    winner_family_name: Optional[str] = None
