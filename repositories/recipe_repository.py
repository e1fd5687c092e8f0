"""
Recipe Repository - Data access layer for the recipes collection
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId

from repositories.base import BaseRepository, Document


class RecipeRepository(BaseRepository):
    """Repository for recipe documents"""

    collection_name = "recipes"

    def create(self, fields: Dict[str, Any], author_id: ObjectId) -> Document:
        """Insert a recipe owned by ``author_id`` with fresh derived counters"""
        doc = dict(fields)
        doc.update(
            {
                "author": author_id,
                "image": doc.get("image") or "default-recipe.jpg",
                "likes": [],
                "likesCount": 0,
                "reviewCount": 0,
            }
        )
        return self.insert(doc)

    def find_featured(self, limit: int) -> List[Document]:
        """Featured published recipes, newest first"""
        return self.find_page(
            {"isFeatured": True, "isPublished": True},
            sort=[("createdAt", -1), ("_id", -1)],
            limit=limit,
        )

    def count_by_author(self, author_id: ObjectId) -> int:
        """Number of recipes the user has authored"""
        return self.count({"author": author_id})

    def set_rating_summary(
        self, recipe_id: ObjectId, average: float, review_count: int
    ) -> bool:
        """Write both cached rating fields in one update.

        Returns:
            False when the recipe no longer exists
        """
        result = self.collection.update_one(
            {"_id": recipe_id},
            {"$set": {"averageRating": average, "reviewCount": review_count}},
        )
        return result.matched_count == 1

    def clear_rating_summary(self, recipe_id: ObjectId) -> bool:
        """Reset the cached rating to the no-reviews state"""
        result = self.collection.update_one(
            {"_id": recipe_id},
            {"$set": {"reviewCount": 0}, "$unset": {"averageRating": ""}},
        )
        return result.matched_count == 1

    def add_like(self, recipe_id: ObjectId, user_id: ObjectId) -> Optional[Document]:
        return self.add_to_set(
            recipe_id, "likes", user_id, counter="likesCount",
            projection={"likesCount": 1},
        )

    def remove_like(self, recipe_id: ObjectId, user_id: ObjectId) -> Optional[Document]:
        return self.pull_from_set(
            recipe_id, "likes", user_id, counter="likesCount",
            projection={"likesCount": 1},
        )

    def set_image(self, recipe_id: ObjectId, filename: str) -> Optional[Document]:
        return self.update_by_id(recipe_id, {"image": filename})
