"""
Tests for request schemas: title trimming and rejection of blank titles on
both create and partial update.
"""

import pytest
from pydantic import ValidationError

from domain.schemas.recipe_schemas import RecipeUpdate
from domain.schemas.review_schemas import ReviewCreate, ReviewUpdate


@pytest.mark.parametrize("model", [RecipeUpdate, ReviewUpdate])
@pytest.mark.parametrize("blank", ["   ", "\t\n"])
def test_update_rejects_blank_title(model, blank):
    with pytest.raises(ValidationError):
        model(title=blank)


@pytest.mark.parametrize("model", [RecipeUpdate, ReviewUpdate])
def test_update_trims_title(model):
    assert model(title="  Better name ").to_changes() == {"title": "Better name"}


@pytest.mark.parametrize("model", [RecipeUpdate, ReviewUpdate])
def test_update_without_title_leaves_it_alone(model):
    assert "title" not in model().to_changes()


def test_review_create_trims_and_rejects_blank_title():
    review = ReviewCreate(title="  Lovely  ", text="Great", rating=5)
    assert review.title == "Lovely"

    with pytest.raises(ValidationError):
        ReviewCreate(title="   ", text="Great", rating=5)
