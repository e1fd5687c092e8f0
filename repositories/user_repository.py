"""
User Repository - Data access layer for the users collection
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from repositories.base import BaseRepository, Document, utcnow

AUTHOR_FIELDS = {"name": 1, "avatar": 1}


class UserRepository(BaseRepository):
    """Repository for user documents"""

    collection_name = "users"

    def get_by_email(self, email: str) -> Optional[Document]:
        """Get user by email"""
        return self.collection.find_one({"email": email})

    def get_summaries(
        self,
        user_ids: Iterable[ObjectId],
        fields: Mapping[str, Any] = AUTHOR_FIELDS,
    ) -> Dict[ObjectId, Document]:
        """Small public projections of several users, keyed by ``_id``"""
        return self.get_by_ids(user_ids, projection=dict(fields))

    def ensure_user(self, email: str, defaults: Dict[str, Any]) -> bool:
        """Create the user only if no account with ``email`` exists.

        Returns:
            True when a new account was inserted
        """
        now = utcnow()
        on_insert = {
            "favorites": [],
            "following": [],
            "followers": [],
            "recipeCount": 0,
            "createdAt": now,
            "updatedAt": now,
            **defaults,
        }
        try:
            result = self.collection.update_one(
                {"email": email}, {"$setOnInsert": on_insert}, upsert=True
            )
        except DuplicateKeyError:
            # another process inserted it between our match and upsert
            return False
        return result.upserted_id is not None

    def set_recipe_count(self, user_id: ObjectId, recipe_count: int) -> bool:
        result = self.collection.update_one(
            {"_id": user_id}, {"$set": {"recipeCount": recipe_count}}
        )
        return result.matched_count == 1

    def set_avatar(self, user_id: ObjectId, filename: str) -> Optional[Document]:
        return self.update_by_id(user_id, {"avatar": filename})

    def add_favorite(self, user_id: ObjectId, recipe_id: ObjectId) -> Optional[Document]:
        return self.add_to_set(user_id, "favorites", recipe_id, projection={"_id": 1})

    def remove_favorite(self, user_id: ObjectId, recipe_id: ObjectId) -> Optional[Document]:
        return self.pull_from_set(user_id, "favorites", recipe_id, projection={"_id": 1})

    def add_following(self, user_id: ObjectId, target_id: ObjectId) -> Optional[Document]:
        return self.add_to_set(user_id, "following", target_id, projection={"following": 1})

    def remove_following(self, user_id: ObjectId, target_id: ObjectId) -> Optional[Document]:
        return self.pull_from_set(user_id, "following", target_id, projection={"following": 1})

    def add_follower(self, user_id: ObjectId, follower_id: ObjectId) -> Optional[Document]:
        """Idempotent mirror of ``add_following`` on the followed user"""
        return self.collection.find_one_and_update(
            {"_id": user_id},
            {"$addToSet": {"followers": follower_id}},
            projection={"followers": 1},
            return_document=ReturnDocument.AFTER,
        )

    def remove_follower(self, user_id: ObjectId, follower_id: ObjectId) -> Optional[Document]:
        """Idempotent mirror of ``remove_following`` on the followed user"""
        return self.collection.find_one_and_update(
            {"_id": user_id},
            {"$pull": {"followers": follower_id}},
            projection={"followers": 1},
            return_document=ReturnDocument.AFTER,
        )
