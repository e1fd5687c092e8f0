from typing import Any, Dict, List
import logging

from pymongo.database import Database

from app.exceptions import ForbiddenError, NotFoundError, ServiceValidationError
from domain.identity import Identity
from domain.mappers import parse_object_id, to_public
from domain.schemas.review_schemas import ReviewCreate, ReviewUpdate
from repositories import RecipeRepository, ReviewRepository
from repositories.base import Document
from services.rating_service import RatingService
from services.recipe_service import attach_users
from services.toggles import toggle_membership

logger = logging.getLogger("recipeshare.review")


class ReviewService:
    """Business logic for reviews. Every write ends with a rating recompute."""

    @staticmethod
    def _get_owned(db: Database, identity: Identity, review_id: Any, action: str) -> Document:
        oid = parse_object_id(review_id, "Review")
        review = ReviewRepository(db).get_by_id(oid)
        if not review:
            raise NotFoundError("Review not found")
        if not identity.can_manage(review.get("user")):
            logger.warning(
                f"review_forbidden review_id={review_id} user_id={identity.user_id} action={action}"
            )
            raise ForbiddenError(f"Not authorized to {action} this review")
        return review

    @staticmethod
    def list_reviews(db: Database, recipe_id: Any) -> List[Dict[str, Any]]:
        """Reviews of a recipe, newest first, with reviewer name and avatar"""
        oid = parse_object_id(recipe_id, "Recipe")
        if not RecipeRepository(db).exists(oid):
            raise NotFoundError("Recipe not found")
        reviews = ReviewRepository(db).find_for_recipe(oid)
        attach_users(db, reviews, field="user")
        return to_public(reviews)

    @staticmethod
    def add_review(
        db: Database, identity: Identity, recipe_id: Any, data: ReviewCreate
    ) -> Dict[str, Any]:
        """
        Create the caller's review of a recipe.

        Raises:
            NotFoundError: recipe does not exist
            ServiceValidationError: the caller already reviewed this recipe
        """
        oid = parse_object_id(recipe_id, "Recipe")
        if not RecipeRepository(db).exists(oid):
            raise NotFoundError("Recipe not found")

        reviews = ReviewRepository(db)
        if reviews.find_by_recipe_and_user(oid, identity.user_id):
            raise ServiceValidationError(
                "You have already reviewed this recipe", code="DUPLICATE_REVIEW"
            )

        # The unique (recipe, user) index catches a concurrent duplicate
        review = reviews.create(data.model_dump(), oid, identity.user_id)
        logger.info(
            f"review_created review_id={review['_id']} recipe_id={oid} rating={review['rating']}"
        )
        RatingService.recompute(db, oid)
        return to_public(review)

    @staticmethod
    def update_review(
        db: Database, identity: Identity, review_id: Any, data: ReviewUpdate
    ) -> Dict[str, Any]:
        review = ReviewService._get_owned(db, identity, review_id, "update")
        changes = data.to_changes()
        if not changes:
            return to_public(review)

        updated = ReviewRepository(db).update_by_id(review["_id"], changes)
        if updated is None:
            raise NotFoundError("Review not found")
        logger.info(f"review_updated review_id={review['_id']} fields={','.join(sorted(changes))}")

        if "rating" in changes:
            RatingService.recompute(db, review["recipe"])
        return to_public(updated)

    @staticmethod
    def delete_review(db: Database, identity: Identity, review_id: Any) -> Dict[str, Any]:
        review = ReviewService._get_owned(db, identity, review_id, "delete")
        deleted = ReviewRepository(db).delete_by_id(review["_id"])
        if not deleted:
            raise NotFoundError("Review not found")
        logger.info(f"review_deleted review_id={review['_id']} recipe_id={review['recipe']}")
        RatingService.recompute(db, review["recipe"])
        return {"id": str(review["_id"])}

    @staticmethod
    def toggle_helpful(db: Database, identity: Identity, review_id: Any) -> Dict[str, Any]:
        oid = parse_object_id(review_id, "Review")
        repo = ReviewRepository(db)
        helpful, doc = toggle_membership(
            add=lambda: repo.add_helpful(oid, identity.user_id),
            remove=lambda: repo.remove_helpful(oid, identity.user_id),
            exists=lambda: repo.exists(oid),
            resource="Review",
        )
        return {"isHelpful": helpful, "helpfulCount": doc.get("helpfulCount", 0)}
