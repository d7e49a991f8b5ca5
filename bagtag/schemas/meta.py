# bagtag/schemas/meta.py
from pydantic import BaseModel, Field


class MetaOption(BaseModel):
    """A selectable value: ``key`` is what the API accepts, ``label`` is for display."""

    key: str = Field(..., json_schema_extra={"example": "Fairway Wood"})
    label: str = Field(..., json_schema_extra={"example": "Fairway Wood"})
