"""Pydantic schemas for recipe documents.

Request bodies use the camelCase keys the web client sends; the same keys are
stored on the MongoDB documents.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from domain.enums import Category, Cuisine, Difficulty


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )


class RecipeIngredient(_CamelModel):
    """Embedded ingredient in a recipe."""

    name: str = Field(..., min_length=1)
    amount: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)


class RecipeInstruction(_CamelModel):
    """Embedded instruction step in a recipe."""

    step: int = Field(..., ge=1)
    description: str = Field(..., min_length=1)


class RecipeNutrition(_CamelModel):
    """Optional nutrition facts per serving."""

    calories: Optional[float] = Field(default=None, ge=0)
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fat: Optional[float] = Field(default=None, ge=0)
    fiber: Optional[float] = Field(default=None, ge=0)
    sugar: Optional[float] = Field(default=None, ge=0)


def strip_required(value: Optional[str], message: str) -> Optional[str]:
    """Trim surrounding whitespace; a value left empty is rejected"""
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class RecipeCreate(_CamelModel):
    """Recipe creation payload. Author and derived counters are set server-side."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    instructions: List[RecipeInstruction] = Field(default_factory=list)
    prep_time: int = Field(..., ge=0, description="Preparation time in minutes")
    cook_time: int = Field(..., ge=0, description="Cooking time in minutes")
    servings: int = Field(..., ge=1)
    difficulty: Difficulty = Difficulty.EASY
    category: Category
    cuisine: Cuisine
    tags: List[str] = Field(default_factory=list)
    nutrition: Optional[RecipeNutrition] = None
    is_published: bool = True
    is_featured: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, "Please add a recipe title")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)

    def to_document(self) -> dict:
        """Document fields supplied by the client, keyed as stored."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RecipeUpdate(_CamelModel):
    """Partial recipe update. Only fields present in the request are written."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    ingredients: Optional[List[RecipeIngredient]] = None
    instructions: Optional[List[RecipeInstruction]] = None
    prep_time: Optional[int] = Field(default=None, ge=0)
    cook_time: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[Difficulty] = None
    category: Optional[Category] = None
    cuisine: Optional[Cuisine] = None
    tags: Optional[List[str]] = None
    nutrition: Optional[RecipeNutrition] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return strip_required(v, "Please add a recipe title")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)

    def to_changes(self) -> dict:
        """Fields explicitly sent by the client, keyed as stored.

        Explicit nulls are dropped since every stored field here is required
        or has a default.
        """
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
