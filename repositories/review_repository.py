"""
Review Repository - Data access layer for the reviews collection
"""

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from repositories.base import BaseRepository, Document
from app.exceptions import ServiceValidationError


class ReviewRepository(BaseRepository):
    """Repository for review documents"""

    collection_name = "reviews"

    def create(
        self, fields: Dict[str, Any], recipe_id: ObjectId, user_id: ObjectId
    ) -> Document:
        """Insert a review for (recipe, user).

        Raises:
            ServiceValidationError: the user already reviewed this recipe
        """
        doc = dict(fields)
        doc.update(
            {"recipe": recipe_id, "user": user_id, "helpful": [], "helpfulCount": 0}
        )
        try:
            return self.insert(doc)
        except DuplicateKeyError:
            raise ServiceValidationError(
                "You have already reviewed this recipe", code="DUPLICATE_REVIEW"
            )

    def find_by_recipe_and_user(
        self, recipe_id: ObjectId, user_id: ObjectId
    ) -> Optional[Document]:
        return self.collection.find_one({"recipe": recipe_id, "user": user_id})

    def find_for_recipe(self, recipe_id: ObjectId) -> List[Document]:
        """All reviews of a recipe, newest first"""
        return self.find_page(
            {"recipe": recipe_id}, sort=[("createdAt", -1), ("_id", -1)]
        )

    def rating_summary(self, recipe_id: ObjectId) -> Tuple[Optional[float], int]:
        """Mean rating and number of reviews currently stored for a recipe.

        Returns:
            (None, 0) when the recipe has no reviews
        """
        rows = list(
            self.collection.aggregate(
                [
                    {"$match": {"recipe": recipe_id}},
                    {
                        "$group": {
                            "_id": "$recipe",
                            "averageRating": {"$avg": "$rating"},
                            "reviewCount": {"$sum": 1},
                        }
                    },
                ]
            )
        )
        if not rows:
            return None, 0
        return rows[0]["averageRating"], rows[0]["reviewCount"]

    def delete_for_recipe(self, recipe_id: ObjectId) -> int:
        """Delete every review of a recipe, returning how many went"""
        return self.collection.delete_many({"recipe": recipe_id}).deleted_count

    def add_helpful(self, review_id: ObjectId, user_id: ObjectId) -> Optional[Document]:
        return self.add_to_set(
            review_id, "helpful", user_id, counter="helpfulCount",
            projection={"helpfulCount": 1},
        )

    def remove_helpful(self, review_id: ObjectId, user_id: ObjectId) -> Optional[Document]:
        return self.pull_from_set(
            review_id, "helpful", user_id, counter="helpfulCount",
            projection={"helpfulCount": 1},
        )
