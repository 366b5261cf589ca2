"""Shared pydantic base model for API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIBaseModel(BaseModel):
    """Base class for all API models.

    Accepts both snake_case field names and their camelCase aliases on input,
    and renders as indented JSON when printed.
    """

    model_config = ConfigDict(populate_by_name=True)

    def __str__(self) -> str:
        return self.model_dump_json(indent=2, ensure_ascii=False)


class CamelModel(APIBaseModel):
    """APIBaseModel whose wire names are camelCase (JS-facing payloads)."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)
