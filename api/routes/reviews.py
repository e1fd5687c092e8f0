"""Review routes - edit, delete and helpful votes on individual reviews."""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from api.dependencies import get_current_identity, get_db
from api.responses import success_response
from domain.identity import Identity
from domain.schemas.review_schemas import ReviewUpdate
from services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.put("/{review_id}")
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return success_response(ReviewService.update_review(db, identity, review_id, payload))


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = ReviewService.delete_review(db, identity, review_id)
    return success_response(result, message="Review deleted successfully")


@router.post("/{review_id}/helpful")
def toggle_helpful(
    review_id: str,
    db: Database = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return success_response(ReviewService.toggle_helpful(db, identity, review_id))
