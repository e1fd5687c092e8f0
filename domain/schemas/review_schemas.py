"""Pydantic schemas for review documents."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from domain.schemas.recipe_schemas import strip_required

TITLE_MESSAGE = "Please add a title for the review"


class ReviewCreate(BaseModel):
    """Review submission. Recipe and user come from the route and identity."""

    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=500)
    rating: int = Field(..., ge=1, le=5, description="Rating between 1 and 5")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, TITLE_MESSAGE)


class ReviewUpdate(BaseModel):
    """Partial review edit."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    text: Optional[str] = Field(default=None, min_length=1, max_length=500)
    rating: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: Optional[str]) -> Optional[str]:
        return strip_required(v, TITLE_MESSAGE)

    def to_changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)
