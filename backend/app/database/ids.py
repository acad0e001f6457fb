"""
ObjectId parsing helpers.
"""
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from app.core.exceptions import InvalidArgument


def parse_object_id(value: Any, label: str = "id") -> ObjectId:
    """
    Convert a path/body identifier to an ObjectId.

    Raises:
        InvalidArgument: If the value is missing or not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    if not value:
        raise InvalidArgument(f"{label} is missing")
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise InvalidArgument(f"Invalid {label}")


def stringify_id(value: Any) -> Any:
    """Render an ObjectId as a string, leave anything else untouched."""
    if isinstance(value, ObjectId):
        return str(value)
    return value
