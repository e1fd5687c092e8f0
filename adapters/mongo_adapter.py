"""MongoDB adapter: client lifecycle and index management.
"""

from typing import Optional
import logging

from pymongo import MongoClient, ASCENDING, DESCENDING, TEXT
from pymongo.database import Database

from app.config import settings

logger = logging.getLogger("recipeshare.mongo")

_client: Optional[MongoClient] = None
_db: Optional[Database] = None


# ------------------ Connection ------------------
def connect(uri: str, db_name: str) -> Database:
    """Open the client and verify the server answers a ping.

    Raises the underlying pymongo error when the server is unreachable so the
    caller can decide whether to retry.
    """
    global _client, _db
    client = MongoClient(uri)
    try:
        client.admin.command("ping")
    except Exception:
        client.close()
        raise
    _client = client
    _db = client[db_name]
    logger.info("Connected to MongoDB %s (database: %s)", uri, db_name)
    return _db


def get_db() -> Database:
    """Return the active database, connecting lazily from settings."""
    global _client, _db
    if _db is not None:
        return _db
    _client = MongoClient(settings.mongo_uri)
    _db = _client[settings.mongo_db_name]
    return _db


def ping() -> bool:
    """Check that the server is reachable."""
    try:
        get_db().client.admin.command("ping")
        return True
    except Exception:
        logger.exception("MongoDB ping failed")
        return False


def close():
    """Close MongoDB connection."""
    global _client, _db
    try:
        if _client is not None:
            _client.close()
            logger.info("MongoDB client closed")
    except Exception:
        logger.exception("Error closing MongoDB client")
    finally:
        _client = None
        _db = None


# ------------------ Indexes ------------------
def ensure_indexes(db: Database) -> None:
    """Create the indexes the API depends on. Safe to run repeatedly."""
    recipes = db["recipes"]
    recipes.create_index(
        [
            ("title", TEXT),
            ("description", TEXT),
            ("ingredients.name", TEXT),
            ("tags", TEXT),
        ],
        name="recipe_text",
    )
    recipes.create_index([("isPublished", ASCENDING), ("createdAt", DESCENDING)])
    recipes.create_index([("isPublished", ASCENDING), ("averageRating", DESCENDING)])
    recipes.create_index([("isPublished", ASCENDING), ("likesCount", DESCENDING)])
    recipes.create_index("author")

    reviews = db["reviews"]
    # One review per user per recipe
    reviews.create_index(
        [("recipe", ASCENDING), ("user", ASCENDING)],
        unique=True,
        name="recipe_user_unique",
    )
    reviews.create_index([("recipe", ASCENDING), ("createdAt", DESCENDING)])

    db["users"].create_index("email", unique=True)
    logger.info("MongoDB indexes ensured")
