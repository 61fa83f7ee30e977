"""
Shared model base - snake_case attributes, camelCase on the wire and in storage.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON field names are the camelCase form of the attributes."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
