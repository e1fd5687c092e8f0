"""
Shared test fixtures and utilities for the RecipeShare test suite.

Builders return documents shaped like the ones stored in MongoDB so that
services and mappers see realistic input. No test here needs a running
database: repositories receive mocked collections and routes get their
dependencies overridden.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from api.dependencies import get_current_identity, get_db
from app.config import settings
from domain.identity import Identity
from main import app

API = settings.api_prefix

# TestClient is not used as a context manager, so the lifespan (MongoDB
# connection) never runs.
client = TestClient(app)

_BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_fake_db():
    """Dict of mocked collections; repositories only use ``db[name]``."""
    return {"recipes": MagicMock(), "reviews": MagicMock(), "users": MagicMock()}


def make_cursor(docs):
    """Mocked pymongo cursor supporting sort/skip/limit chaining and iteration."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.__iter__.return_value = iter(list(docs))
    return cursor


def make_user(user_id=None, name="Sarah Martinez", role="user", **extra):
    doc = {
        "_id": user_id or ObjectId(),
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
        "avatar": "default-avatar.jpg",
        "bio": "Home cook",
        "role": role,
        "favorites": [],
        "following": [],
        "followers": [],
        "recipeCount": 0,
        "createdAt": _BASE_TIME,
    }
    doc.update(extra)
    return doc


def make_recipe(recipe_id=None, author_id=None, title="Lemon Tart", minutes_ago=0, **extra):
    """
    Create a recipe document with realistic defaults.

    Example:
        >>> recipe = make_recipe(category="Dessert", averageRating=4.5)
        >>> recipe["likesCount"]
        0
    """
    created = _BASE_TIME - timedelta(minutes=minutes_ago)
    doc = {
        "_id": recipe_id or ObjectId(),
        "title": title,
        "description": "Bright, sharp and sweet.",
        "ingredients": [{"name": "Lemon", "amount": "3", "unit": "whole"}],
        "instructions": [{"step": 1, "description": "Bake the shell."}],
        "prepTime": 20,
        "cookTime": 35,
        "servings": 8,
        "difficulty": "Medium",
        "category": "Dessert",
        "cuisine": "French",
        "tags": ["tart", "citrus"],
        "image": "default-recipe.jpg",
        "author": author_id or ObjectId(),
        "isPublished": True,
        "isFeatured": False,
        "likes": [],
        "likesCount": 0,
        "reviewCount": 0,
        "createdAt": created,
        "updatedAt": created,
    }
    doc.update(extra)
    return doc


def make_review(review_id=None, recipe_id=None, user_id=None, rating=4, **extra):
    doc = {
        "_id": review_id or ObjectId(),
        "title": "Great weeknight dinner",
        "text": "Came together quickly and the family loved it.",
        "rating": rating,
        "recipe": recipe_id or ObjectId(),
        "user": user_id or ObjectId(),
        "helpful": [],
        "helpfulCount": 0,
        "createdAt": _BASE_TIME,
    }
    doc.update(extra)
    return doc


def make_identity(user_id=None, role="user", name="Sarah Martinez"):
    return Identity(user_id=user_id or ObjectId(), role=role, name=name)


@pytest.fixture
def fake_db():
    return make_fake_db()


@pytest.fixture
def api_db():
    """Override the database dependency for route tests."""
    db = MagicMock()
    app.dependency_overrides[get_db] = lambda: db
    yield db
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def signed_in(api_db):
    """Override the identity dependency with a regular user."""
    identity = make_identity()
    app.dependency_overrides[get_current_identity] = lambda: identity
    yield identity
    app.dependency_overrides.pop(get_current_identity, None)
