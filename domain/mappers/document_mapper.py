"""
Document mappers.
Handles transformation between raw MongoDB documents and API payloads.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId

from app.exceptions import NotFoundError


def parse_object_id(value: Any, resource: str = "Resource") -> ObjectId:
    """
    Convert a path parameter into an ObjectId.

    A malformed id can never resolve to a document, so it is reported the same
    way as a missing one.

    Raises:
        NotFoundError: value is not a valid ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(f"{resource} not found")


def to_public(value: Any) -> Any:
    """Recursively convert BSON types into JSON-friendly values.

    Documents keep ``_id`` and gain an ``id`` copy, mirroring what the web
    client expects.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        out = {k: to_public(v) for k, v in value.items()}
        if "_id" in out and "id" not in out:
            out["id"] = out["_id"]
        return out
    if isinstance(value, (list, tuple)):
        return [to_public(item) for item in value]
    return value


def recipe_to_public(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Public recipe payload including the derived ``totalTime``."""
    if doc is None:
        return None
    out = to_public(doc)
    out["totalTime"] = (doc.get("prepTime") or 0) + (doc.get("cookTime") or 0)
    return out


def user_to_public(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Public user payload; credentials never leave the service."""
    if doc is None:
        return None
    out = to_public(doc)
    out.pop("password", None)
    return out
