"""Shared base model for API-facing data models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names.

    Accepts both the snake_case attribute name and the camelCase alias on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
