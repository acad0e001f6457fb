"""
Shared base for MongoDB document models.
"""
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, Field, model_validator


def _stringify(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    return value


class DocumentModel(BaseModel):
    """Document model whose ObjectId fields are exposed as strings."""
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")

    @model_validator(mode="before")
    @classmethod
    def _stringify_object_ids(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: _stringify(v) for k, v in data.items()}
        return data

    class Config:
        populate_by_name = True
        use_enum_values = True
