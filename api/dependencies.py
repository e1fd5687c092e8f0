"""
API dependencies for dependency injection
"""

from typing import Optional

from fastapi import Depends, Header
from pymongo.database import Database

from adapters import mongo_adapter
from domain.identity import Identity
from services.user_service import UserService


def get_db() -> Database:
    """
    Database handle dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Database = Depends(get_db)):
            # Use db here
            pass
    """
    return mongo_adapter.get_db()


def get_current_identity(
    x_user_id: Optional[str] = Header(default=None),
    db: Database = Depends(get_db),
) -> Identity:
    """Resolve the authenticated caller.

    Credential verification happens upstream; by the time a request reaches
    the API it carries the verified user id in ``X-User-Id``.
    """
    return UserService.resolve_identity(db, x_user_id)
