"""
Rating aggregate maintenance.

``averageRating`` and ``reviewCount`` on a recipe are a cache of its reviews.
Every write path that adds, edits or removes a review calls
``RatingService.recompute`` afterwards; nothing else writes those fields.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple
import logging

from bson import ObjectId
from pymongo.database import Database

from repositories import RecipeRepository, ReviewRepository

logger = logging.getLogger("recipeshare.rating")

RatingSummary = Tuple[Optional[float], int]


def round_rating(mean: float) -> float:
    """Round to one decimal place, halves away from zero (4.25 -> 4.3)"""
    return float(Decimal(str(mean)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class RatingService:
    """Keeps the cached rating summary of recipes in step with their reviews"""

    @staticmethod
    def recompute(db: Database, recipe_id: ObjectId) -> Optional[RatingSummary]:
        """
        Recompute and store ``(averageRating, reviewCount)`` for a recipe.

        Reads the full current review set, so concurrent calls for the same
        recipe converge on the last writer's (correct) value.

        Failures are logged and swallowed: the review write that triggered the
        recompute has already happened, and the next trigger repairs the cache.

        Returns:
            the stored summary, or None if it could not be stored
        """
        try:
            mean, count = ReviewRepository(db).rating_summary(recipe_id)
            recipes = RecipeRepository(db)

            if count == 0:
                summary: RatingSummary = (None, 0)
                stored = recipes.clear_rating_summary(recipe_id)
            else:
                summary = (round_rating(mean), count)
                stored = recipes.set_rating_summary(recipe_id, summary[0], count)

            if not stored:
                logger.warning(f"rating_recompute_recipe_missing recipe_id={recipe_id}")
                return None

            logger.info(
                f"rating_recomputed recipe_id={recipe_id} "
                f"average={summary[0]} count={summary[1]}"
            )
            return summary
        except Exception:
            logger.exception(f"rating_recompute_failed recipe_id={recipe_id}")
            return None
