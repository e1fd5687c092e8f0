"""
Domain mappers package.
Handles transformation between MongoDB documents and API payloads.
"""

from domain.mappers.document_mapper import (
    parse_object_id,
    to_public,
    recipe_to_public,
    user_to_public,
)

__all__ = ["parse_object_id", "to_public", "recipe_to_public", "user_to_public"]
