"""Services package - Business logic layer"""

from services.rating_service import RatingService
from services.recipe_service import RecipeService
from services.review_service import ReviewService
from services.user_service import UserService

# Note: query_builder contains pure functions, not a class

__all__ = [
    "RatingService",
    "RecipeService",
    "ReviewService",
    "UserService",
]
