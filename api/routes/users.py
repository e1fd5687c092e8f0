"""User routes - profiles, authored recipes, follows, favorites and avatars."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pymongo.database import Database

from api.dependencies import get_current_identity, get_db
from api.responses import list_response, paginated_response, success_response
from app.exceptions import ServiceValidationError
from domain.identity import Identity
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("")
def list_users(
    search: Optional[str] = Query(default=None, description="Match name or bio"),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    db: Database = Depends(get_db),
):
    result = UserService.list_users(db, {"search": search, "page": page, "limit": limit})
    return paginated_response(result)


# Static paths must be registered before /{user_id}


@router.get("/favorites")
def get_favorites(
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """The caller's favorite recipes"""
    return list_response(UserService.get_favorites(db, identity))


@router.put("/avatar")
def upload_avatar(
    avatar: Optional[UploadFile] = File(default=None),
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    if avatar is None:
        raise ServiceValidationError("Please upload a file", code="NO_FILE")
    user = UserService.set_avatar(
        db, identity, avatar.file, avatar.content_type, avatar.filename
    )
    return success_response(user)


@router.get("/{user_id}")
def get_user(user_id: str, db: Database = Depends(get_db)):
    return success_response(UserService.get_user(db, user_id))


@router.get("/{user_id}/recipes")
def get_user_recipes(
    user_id: str,
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    sort: Optional[str] = Query(default=None),
    db: Database = Depends(get_db),
):
    params = {"page": page, "limit": limit, "sort": sort}
    return paginated_response(UserService.list_user_recipes(db, user_id, params))


@router.post("/{user_id}/follow")
def toggle_follow(
    user_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = UserService.toggle_follow(db, identity, user_id)
    message = "User followed" if result["isFollowing"] else "User unfollowed"
    return success_response(result, message=message)
