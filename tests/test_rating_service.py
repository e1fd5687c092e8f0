"""
Tests for the rating aggregate maintainer.

Covers:
- rounding to one decimal with halves going up
- storing the summary, clearing it when no reviews remain
- the add / edit / delete review sequence converging on the right values
- failures being logged and swallowed
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from repositories import RecipeRepository, ReviewRepository
from services.rating_service import RatingService, round_rating


@pytest.mark.parametrize(
    "mean, expected",
    [
        (4.0, 4.0),
        (4.5, 4.5),
        (4.25, 4.3),
        (4.35, 4.4),
        (13 / 3, 4.3),
        (11 / 3, 3.7),
        (1.05, 1.1),
        (5, 5.0),
    ],
)
def test_round_rating(mean, expected):
    assert round_rating(mean) == expected


def test_recompute_stores_rounded_mean_and_count():
    recipe_id = ObjectId()
    with patch.object(ReviewRepository, "rating_summary", return_value=(4.25, 4)), \
         patch.object(RecipeRepository, "set_rating_summary", return_value=True) as store, \
         patch.object(RecipeRepository, "clear_rating_summary") as clear:
        summary = RatingService.recompute(MagicMock(), recipe_id)

    assert summary == (4.3, 4)
    store.assert_called_once_with(recipe_id, 4.3, 4)
    clear.assert_not_called()


def test_recompute_clears_summary_when_no_reviews():
    recipe_id = ObjectId()
    with patch.object(ReviewRepository, "rating_summary", return_value=(None, 0)), \
         patch.object(RecipeRepository, "set_rating_summary") as store, \
         patch.object(RecipeRepository, "clear_rating_summary", return_value=True) as clear:
        summary = RatingService.recompute(MagicMock(), recipe_id)

    assert summary == (None, 0)
    clear.assert_called_once_with(recipe_id)
    store.assert_not_called()


def test_recompute_for_missing_recipe_returns_none():
    with patch.object(ReviewRepository, "rating_summary", return_value=(3.0, 1)), \
         patch.object(RecipeRepository, "set_rating_summary", return_value=False):
        assert RatingService.recompute(MagicMock(), ObjectId()) is None


def test_recompute_failure_is_logged_not_raised(caplog):
    recipe_id = ObjectId()
    with patch.object(
        ReviewRepository, "rating_summary", side_effect=PyMongoError("connection reset")
    ), patch.object(RecipeRepository, "set_rating_summary") as store:
        with caplog.at_level(logging.ERROR, logger="recipeshare.rating"):
            result = RatingService.recompute(MagicMock(), recipe_id)

    assert result is None
    store.assert_not_called()
    assert f"rating_recompute_failed recipe_id={recipe_id}" in caplog.text


def test_review_sequence_converges():
    """Three reviews, one edited, one removed, then all removed."""
    recipe_id = ObjectId()
    ratings = []
    stored = {}

    def summary(_rid):
        if not ratings:
            return None, 0
        return sum(ratings) / len(ratings), len(ratings)

    def store(_rid, average, count):
        stored.update(averageRating=average, reviewCount=count)
        return True

    def clear(_rid):
        stored.pop("averageRating", None)
        stored["reviewCount"] = 0
        return True

    with patch.object(ReviewRepository, "rating_summary", side_effect=summary), \
         patch.object(RecipeRepository, "set_rating_summary", side_effect=store), \
         patch.object(RecipeRepository, "clear_rating_summary", side_effect=clear):
        ratings.extend([5, 4, 3])
        RatingService.recompute(MagicMock(), recipe_id)
        assert stored == {"averageRating": 4.0, "reviewCount": 3}

        ratings.remove(3)
        RatingService.recompute(MagicMock(), recipe_id)
        assert stored == {"averageRating": 4.5, "reviewCount": 2}

        ratings[1] = 5
        RatingService.recompute(MagicMock(), recipe_id)
        assert stored == {"averageRating": 5.0, "reviewCount": 2}

        ratings.clear()
        RatingService.recompute(MagicMock(), recipe_id)
        assert stored == {"reviewCount": 0}
