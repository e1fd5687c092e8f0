#!/usr/bin/env python3
"""
Seed or wipe the RecipeShare database.

Usage:
    python scripts/seed.py -i    # import sample users and recipes
    python scripts/seed.py -d    # delete all users, recipes and reviews
"""

import sys
import logging
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapters import mongo_adapter
from app.config import settings
from domain.schemas.recipe_schemas import RecipeCreate
from repositories import RecipeRepository, UserRepository
from services.recipe_service import refresh_recipe_count
from services.user_service import UserService

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("recipeshare.seed")

SAMPLE_USER = {
    "name": "John Doe",
    "email": "john@example.com",
    "bio": "I love cooking and sharing recipes!",
    "location": "New York, USA",
    "role": "user",
}

SAMPLE_RECIPES = [
    {
        "title": "Classic Spaghetti Carbonara",
        "description": "A traditional Italian pasta dish with eggs, cheese, pancetta, and pepper.",
        "ingredients": [
            {"name": "Spaghetti", "amount": "400", "unit": "grams"},
            {"name": "Pancetta", "amount": "200", "unit": "grams"},
            {"name": "Eggs", "amount": "4", "unit": "large"},
            {"name": "Parmesan cheese", "amount": "100", "unit": "grams"},
            {"name": "Black pepper", "amount": "1", "unit": "teaspoon"},
        ],
        "instructions": [
            {"step": 1, "description": "Cook spaghetti in salted boiling water until al dente."},
            {"step": 2, "description": "Fry pancetta in a large pan until crispy."},
            {"step": 3, "description": "Beat eggs with grated parmesan and black pepper."},
            {"step": 4, "description": "Drain pasta and add to pancetta pan."},
            {"step": 5, "description": "Remove from heat and quickly mix in egg mixture."},
        ],
        "prepTime": 10,
        "cookTime": 15,
        "servings": 4,
        "difficulty": "Medium",
        "category": "Main Course",
        "cuisine": "Italian",
        "tags": ["pasta", "italian", "quick", "dinner"],
    },
    {
        "title": "Chocolate Chip Cookies",
        "description": "Soft and chewy chocolate chip cookies that are perfect for any occasion.",
        "ingredients": [
            {"name": "All-purpose flour", "amount": "2.25", "unit": "cups"},
            {"name": "Butter", "amount": "1", "unit": "cup"},
            {"name": "Brown sugar", "amount": "0.75", "unit": "cup"},
            {"name": "White sugar", "amount": "0.75", "unit": "cup"},
            {"name": "Eggs", "amount": "2", "unit": "large"},
            {"name": "Vanilla extract", "amount": "2", "unit": "teaspoons"},
            {"name": "Chocolate chips", "amount": "2", "unit": "cups"},
        ],
        "instructions": [
            {"step": 1, "description": "Preheat oven to 375°F (190°C)."},
            {"step": 2, "description": "Cream together butter and sugars."},
            {"step": 3, "description": "Beat in eggs and vanilla."},
            {"step": 4, "description": "Gradually add flour mixture."},
            {"step": 5, "description": "Stir in chocolate chips."},
            {"step": 6, "description": "Drop spoonfuls on baking sheet and bake 9-11 minutes."},
        ],
        "prepTime": 15,
        "cookTime": 10,
        "servings": 24,
        "difficulty": "Easy",
        "category": "Dessert",
        "cuisine": "American",
        "tags": ["cookies", "dessert", "baking", "sweet"],
    },
]


def delete_data(db) -> None:
    for name in ("reviews", "recipes", "users"):
        deleted = db[name].delete_many({}).deleted_count
        logger.info(f"✓ Deleted {deleted} documents from '{name}'")


def import_data(db) -> None:
    delete_data(db)
    mongo_adapter.ensure_indexes(db)
    UserService.ensure_default_admin(db)

    users = UserRepository(db)
    users.ensure_user(SAMPLE_USER["email"], SAMPLE_USER)
    author = users.get_by_email(SAMPLE_USER["email"])

    recipes = RecipeRepository(db)
    for raw in SAMPLE_RECIPES:
        recipe = recipes.create(RecipeCreate(**raw).to_document(), author["_id"])
        logger.info(f"✓ Created recipe '{recipe['title']}'")
    refresh_recipe_count(db, author["_id"])


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the RecipeShare database")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-i", "--import", dest="do_import", action="store_true",
                       help="Replace all data with the sample data set")
    group.add_argument("-d", "--delete", dest="do_delete", action="store_true",
                       help="Delete all users, recipes and reviews")
    args = parser.parse_args(argv)

    try:
        db = mongo_adapter.connect(settings.mongo_uri, settings.mongo_db_name)
    except Exception as exc:
        logger.error(f"✗ Could not connect to MongoDB: {exc}")
        return 1

    try:
        if args.do_import:
            import_data(db)
            logger.info("Data imported")
        else:
            delete_data(db)
            logger.info("Data destroyed")
        return 0
    finally:
        mongo_adapter.close()


if __name__ == "__main__":
    sys.exit(main())
