"""
ObjectId utilities for converting between MongoDB ids and the string ids
exposed by the API.
"""

from typing import Any, Dict, Optional

from bson import ObjectId


def to_object_id(value: str) -> Optional[ObjectId]:
    """
    Convert a string id to an ObjectId.

    Returns None for anything that is not a valid 24-character hex id, so that
    callers can treat malformed ids the same way as unknown ones.
    """
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def with_str_id(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy a Mongo document, exposing its _id as a string ``id``"""
    result = dict(doc)
    result["id"] = str(result.pop("_id"))
    return result
