"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.recipe_schemas import (
    RecipeIngredient,
    RecipeInstruction,
    RecipeNutrition,
    RecipeCreate,
    RecipeUpdate,
)
from domain.schemas.review_schemas import ReviewCreate, ReviewUpdate

__all__ = [
    # Recipe schemas
    "RecipeIngredient",
    "RecipeInstruction",
    "RecipeNutrition",
    "RecipeCreate",
    "RecipeUpdate",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
]
