from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Season(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    season: str = ""
    given_name: str = ""
    family_name: str = ""
    driver_id: str = ""
