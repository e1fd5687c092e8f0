"""
Tests for the MongoDB repositories.

Collections are MagicMocks, so these tests pin down the exact queries and
updates each repository sends rather than database behaviour.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import ServiceValidationError
from repositories import RecipeRepository, ReviewRepository, UserRepository

from test_fixtures import make_cursor, make_fake_db, make_recipe


# ============================================================================
# BASE REPOSITORY TESTS
# ============================================================================


def test_find_page_applies_sort_skip_and_limit():
    db = make_fake_db()
    docs = [make_recipe(), make_recipe()]
    cursor = make_cursor(docs)
    db["recipes"].find.return_value = cursor

    result = RecipeRepository(db).find_page(
        {"isPublished": True}, sort=[("createdAt", -1), ("_id", -1)], skip=24, limit=12
    )

    assert result == docs
    db["recipes"].find.assert_called_once_with({"isPublished": True}, None)
    cursor.sort.assert_called_once_with([("createdAt", -1), ("_id", -1)])
    cursor.skip.assert_called_once_with(24)
    cursor.limit.assert_called_once_with(12)


def test_find_page_without_window_does_not_skip_or_limit():
    db = make_fake_db()
    cursor = make_cursor([])
    db["recipes"].find.return_value = cursor

    assert RecipeRepository(db).find_page({}) == []
    cursor.skip.assert_not_called()
    cursor.limit.assert_not_called()


def test_get_by_ids_short_circuits_on_empty_input():
    db = make_fake_db()

    assert UserRepository(db).get_by_ids([]) == {}
    db["users"].find.assert_not_called()


def test_get_by_ids_dedupes_and_keys_by_id():
    db = make_fake_db()
    a, b = ObjectId(), ObjectId()
    db["users"].find.return_value = [{"_id": a}, {"_id": b}]

    found = UserRepository(db).get_by_ids([a, b, a])

    assert set(found) == {a, b}
    db["users"].find.assert_called_once_with({"_id": {"$in": [a, b]}}, None)


def test_insert_stamps_timestamps_and_id():
    db = make_fake_db()
    new_id = ObjectId()
    db["reviews"].insert_one.return_value = MagicMock(inserted_id=new_id)

    doc = ReviewRepository(db).insert({"rating": 5})

    assert doc["_id"] == new_id
    assert doc["createdAt"] == doc["updatedAt"]


def test_update_by_id_sets_updated_at_and_returns_after():
    db = make_fake_db()
    recipe_id = ObjectId()

    RecipeRepository(db).update_by_id(recipe_id, {"title": "New"})

    args, kwargs = db["recipes"].find_one_and_update.call_args
    assert args[0] == {"_id": recipe_id}
    assert args[1]["$set"]["title"] == "New"
    assert "updatedAt" in args[1]["$set"]
    assert kwargs["return_document"] is ReturnDocument.AFTER


# ============================================================================
# RECIPE REPOSITORY TESTS
# ============================================================================


def test_create_recipe_initialises_derived_fields():
    db = make_fake_db()
    db["recipes"].insert_one.return_value = MagicMock(inserted_id=ObjectId())
    author = ObjectId()

    recipe = RecipeRepository(db).create(
        {"title": "Soup", "likesCount": 99, "likes": [ObjectId()]}, author
    )

    assert recipe["author"] == author
    assert recipe["likes"] == []
    assert recipe["likesCount"] == 0
    assert recipe["reviewCount"] == 0
    assert recipe["image"] == "default-recipe.jpg"
    assert "averageRating" not in recipe


def test_add_like_only_matches_when_not_already_liked():
    db = make_fake_db()
    recipe_id, user_id = ObjectId(), ObjectId()

    RecipeRepository(db).add_like(recipe_id, user_id)

    args, kwargs = db["recipes"].find_one_and_update.call_args
    assert args[0] == {"_id": recipe_id, "likes": {"$ne": user_id}}
    assert args[1] == {"$addToSet": {"likes": user_id}, "$inc": {"likesCount": 1}}
    assert kwargs["return_document"] is ReturnDocument.AFTER


def test_remove_like_only_matches_when_liked():
    db = make_fake_db()
    recipe_id, user_id = ObjectId(), ObjectId()

    RecipeRepository(db).remove_like(recipe_id, user_id)

    args, _ = db["recipes"].find_one_and_update.call_args
    assert args[0] == {"_id": recipe_id, "likes": user_id}
    assert args[1] == {"$pull": {"likes": user_id}, "$inc": {"likesCount": -1}}


def test_set_rating_summary_writes_both_fields():
    db = make_fake_db()
    recipe_id = ObjectId()
    db["recipes"].update_one.return_value = MagicMock(matched_count=1)

    assert RecipeRepository(db).set_rating_summary(recipe_id, 4.5, 2) is True
    db["recipes"].update_one.assert_called_once_with(
        {"_id": recipe_id}, {"$set": {"averageRating": 4.5, "reviewCount": 2}}
    )


def test_clear_rating_summary_unsets_average():
    db = make_fake_db()
    recipe_id = ObjectId()
    db["recipes"].update_one.return_value = MagicMock(matched_count=0)

    assert RecipeRepository(db).clear_rating_summary(recipe_id) is False
    db["recipes"].update_one.assert_called_once_with(
        {"_id": recipe_id}, {"$set": {"reviewCount": 0}, "$unset": {"averageRating": ""}}
    )


# ============================================================================
# REVIEW REPOSITORY TESTS
# ============================================================================


def test_create_review_maps_duplicate_key_to_validation_error():
    db = make_fake_db()
    db["reviews"].insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

    with pytest.raises(ServiceValidationError) as exc_info:
        ReviewRepository(db).create({"rating": 4}, ObjectId(), ObjectId())

    assert exc_info.value.code == "DUPLICATE_REVIEW"
    assert exc_info.value.http_status == 400


def test_rating_summary_groups_by_recipe():
    db = make_fake_db()
    recipe_id = ObjectId()
    db["reviews"].aggregate.return_value = iter(
        [{"_id": recipe_id, "averageRating": 4.0, "reviewCount": 3}]
    )

    assert ReviewRepository(db).rating_summary(recipe_id) == (4.0, 3)

    pipeline = db["reviews"].aggregate.call_args[0][0]
    assert pipeline[0] == {"$match": {"recipe": recipe_id}}
    assert pipeline[1]["$group"]["averageRating"] == {"$avg": "$rating"}
    assert pipeline[1]["$group"]["reviewCount"] == {"$sum": 1}


def test_rating_summary_without_reviews():
    db = make_fake_db()
    db["reviews"].aggregate.return_value = iter([])

    assert ReviewRepository(db).rating_summary(ObjectId()) == (None, 0)


def test_delete_for_recipe_returns_count():
    db = make_fake_db()
    recipe_id = ObjectId()
    db["reviews"].delete_many.return_value = MagicMock(deleted_count=3)

    assert ReviewRepository(db).delete_for_recipe(recipe_id) == 3
    db["reviews"].delete_many.assert_called_once_with({"recipe": recipe_id})


# ============================================================================
# USER REPOSITORY TESTS
# ============================================================================


def test_ensure_user_inserts_only_when_missing():
    db = make_fake_db()
    db["users"].update_one.return_value = MagicMock(upserted_id=ObjectId())

    assert UserRepository(db).ensure_user("admin@recipe.com", {"role": "admin"}) is True

    args, kwargs = db["users"].update_one.call_args
    assert args[0] == {"email": "admin@recipe.com"}
    assert args[1]["$setOnInsert"]["role"] == "admin"
    assert args[1]["$setOnInsert"]["recipeCount"] == 0
    assert kwargs["upsert"] is True


def test_ensure_user_existing_account_is_untouched():
    db = make_fake_db()
    db["users"].update_one.return_value = MagicMock(upserted_id=None)

    assert UserRepository(db).ensure_user("admin@recipe.com", {}) is False


def test_ensure_user_race_on_unique_email():
    db = make_fake_db()
    db["users"].update_one.side_effect = DuplicateKeyError("E11000 duplicate key")

    assert UserRepository(db).ensure_user("admin@recipe.com", {}) is False


def test_add_follower_is_idempotent_add_to_set():
    db = make_fake_db()
    user_id, follower = ObjectId(), ObjectId()

    UserRepository(db).add_follower(user_id, follower)

    args, _ = db["users"].find_one_and_update.call_args
    assert args[0] == {"_id": user_id}
    assert args[1] == {"$addToSet": {"followers": follower}}
