"""
Recipe routes - listing, detail, CRUD, likes, favorites, images and reviews.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from pymongo.database import Database

from api.dependencies import get_current_identity, get_db
from api.responses import list_response, paginated_response, success_response
from app.exceptions import ServiceValidationError
from domain.identity import Identity
from domain.schemas.recipe_schemas import RecipeCreate, RecipeUpdate
from domain.schemas.review_schemas import ReviewCreate
from services.recipe_service import RecipeService
from services.review_service import ReviewService

router = APIRouter(prefix="/recipes", tags=["Recipes"])


@router.get("")
def list_recipes(
    search: Optional[str] = Query(default=None, description="Full-text search"),
    category: Optional[str] = Query(default=None, description="Exact category"),
    cuisine: Optional[str] = Query(default=None, description="Exact cuisine"),
    difficulty: Optional[str] = Query(default=None, description="Easy, Medium or Hard"),
    maxPrepTime: Optional[str] = Query(default=None, description="Max prep minutes"),
    minRating: Optional[str] = Query(default=None, description="Minimum average rating"),
    page: Optional[str] = Query(default=None, description="Page number, from 1"),
    limit: Optional[str] = Query(default=None, description="Page size"),
    sort: Optional[str] = Query(default=None, description="newest, oldest, rating or popular"),
    db: Database = Depends(get_db),
):
    """
    List published recipes.

    Numeric parameters are accepted as text; values that do not parse are
    ignored instead of failing the request.
    """
    params = {
        "search": search,
        "category": category,
        "cuisine": cuisine,
        "difficulty": difficulty,
        "maxPrepTime": maxPrepTime,
        "minRating": minRating,
        "page": page,
        "limit": limit,
        "sort": sort,
    }
    return paginated_response(RecipeService.list_recipes(db, params))


@router.get("/featured")
def list_featured(db: Database = Depends(get_db)):
    """Featured recipes for the home page"""
    return list_response(RecipeService.list_featured(db))


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, db: Database = Depends(get_db)):
    """Single recipe with author details and reviews"""
    return success_response(RecipeService.get_recipe(db, recipe_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return success_response(RecipeService.create_recipe(db, identity, payload))


@router.put("/{recipe_id}")
def update_recipe(
    recipe_id: str,
    payload: RecipeUpdate,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return success_response(RecipeService.update_recipe(db, identity, recipe_id, payload))


@router.delete("/{recipe_id}")
def delete_recipe(
    recipe_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = RecipeService.delete_recipe(db, identity, recipe_id)
    return success_response(result, message="Recipe deleted successfully")


@router.post("/{recipe_id}/like")
def toggle_like(
    recipe_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = RecipeService.toggle_like(db, identity, recipe_id)
    message = "Recipe liked" if result["isLiked"] else "Recipe unliked"
    return success_response(result, message=message)


@router.post("/{recipe_id}/favorite")
def toggle_favorite(
    recipe_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = RecipeService.toggle_favorite(db, identity, recipe_id)
    message = (
        "Recipe added to favorites"
        if result["isFavorited"]
        else "Recipe removed from favorites"
    )
    return success_response(result, message=message)


@router.put("/{recipe_id}/image")
def upload_recipe_image(
    recipe_id: str,
    image: Optional[UploadFile] = File(default=None),
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    if image is None:
        raise ServiceValidationError("Please upload a file", code="NO_FILE")
    recipe = RecipeService.set_image(
        db, identity, recipe_id, image.file, image.content_type, image.filename
    )
    return success_response(recipe)


@router.get("/{recipe_id}/reviews")
def list_reviews(recipe_id: str, db: Database = Depends(get_db)):
    return list_response(ReviewService.list_reviews(db, recipe_id))


@router.post("/{recipe_id}/reviews", status_code=status.HTTP_201_CREATED)
def add_review(
    recipe_id: str,
    payload: ReviewCreate,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return success_response(ReviewService.add_review(db, identity, recipe_id, payload))
