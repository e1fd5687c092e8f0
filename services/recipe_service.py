from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional
import logging

from bson import ObjectId
from pymongo.database import Database

from adapters import media_storage
from app.config import settings
from app.exceptions import ForbiddenError, NotFoundError
from domain.identity import Identity
from domain.mappers import parse_object_id, recipe_to_public, to_public
from domain.schemas.recipe_schemas import RecipeCreate, RecipeUpdate
from repositories import RecipeRepository, ReviewRepository, UserRepository
from repositories.base import Document
from services.query_builder import RecipeQueryPlan, build_recipe_query
from services.rating_service import RatingService
from services.toggles import toggle_membership

logger = logging.getLogger("recipeshare.recipe")

AUTHOR_SUMMARY = {"name": 1, "avatar": 1}
AUTHOR_DETAIL = {"name": 1, "avatar": 1, "bio": 1}


def attach_users(
    db: Database,
    docs: List[Document],
    field: str = "author",
    fields: Mapping[str, Any] = AUTHOR_SUMMARY,
) -> List[Document]:
    """Replace the user reference in ``field`` by a small projection of that user.

    Only the projected fields are exposed; a dangling reference becomes None.
    """
    ids = [doc[field] for doc in docs if isinstance(doc.get(field), ObjectId)]
    users = UserRepository(db).get_summaries(ids, fields)
    for doc in docs:
        ref = doc.get(field)
        if isinstance(ref, ObjectId):
            doc[field] = users.get(ref)
    return docs


def run_listing(db: Database, plan: RecipeQueryPlan) -> Dict[str, Any]:
    """Execute a listing plan and return one page plus its totals"""
    repo = RecipeRepository(db)
    docs = repo.find_page(plan.filter, sort=plan.sort, skip=plan.skip, limit=plan.limit)
    total = repo.count(plan.filter)
    attach_users(db, docs)
    return {
        "items": [recipe_to_public(doc) for doc in docs],
        "total": total,
        "page": plan.page,
        "limit": plan.limit,
        "pages": plan.window.pages_for(total),
    }


def refresh_recipe_count(db: Database, author_id: ObjectId) -> None:
    """Recompute the author's cached ``recipeCount``; failures are only logged"""
    try:
        count = RecipeRepository(db).count_by_author(author_id)
        UserRepository(db).set_recipe_count(author_id, count)
    except Exception:
        logger.exception(f"recipe_count_refresh_failed user_id={author_id}")


class RecipeService:
    """Business logic for recipes, likes, favorites and recipe images"""

    @staticmethod
    def _get_or_404(db: Database, recipe_id: Any) -> Document:
        oid = parse_object_id(recipe_id, "Recipe")
        recipe = RecipeRepository(db).get_by_id(oid)
        if not recipe:
            logger.warning(f"recipe_not_found recipe_id={recipe_id}")
            raise NotFoundError("Recipe not found")
        return recipe

    @staticmethod
    def _get_owned(db: Database, identity: Identity, recipe_id: Any, action: str) -> Document:
        recipe = RecipeService._get_or_404(db, recipe_id)
        if not identity.can_manage(recipe.get("author")):
            logger.warning(
                f"recipe_forbidden recipe_id={recipe_id} user_id={identity.user_id} action={action}"
            )
            raise ForbiddenError(f"Not authorized to {action} this recipe")
        return recipe

    @staticmethod
    def list_recipes(db: Database, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Filtered, sorted, paginated listing of published recipes"""
        plan = build_recipe_query(params)
        result = run_listing(db, plan)
        logger.info(
            f"recipes_listed total={result['total']} page={plan.page} "
            f"limit={plan.limit} sort={plan.sort_key.value}"
        )
        return result

    @staticmethod
    def list_featured(db: Database) -> List[Dict[str, Any]]:
        docs = RecipeRepository(db).find_featured(settings.featured_limit)
        attach_users(db, docs)
        return [recipe_to_public(doc) for doc in docs]

    @staticmethod
    def get_recipe(db: Database, recipe_id: Any) -> Dict[str, Any]:
        """Recipe with author details and its reviews, newest first"""
        recipe = RecipeService._get_or_404(db, recipe_id)
        attach_users(db, [recipe], fields=AUTHOR_DETAIL)
        reviews = ReviewRepository(db).find_for_recipe(recipe["_id"])
        attach_users(db, reviews, field="user")
        out = recipe_to_public(recipe)
        out["reviews"] = to_public(reviews)
        return out

    @staticmethod
    def create_recipe(db: Database, identity: Identity, data: RecipeCreate) -> Dict[str, Any]:
        recipe = RecipeRepository(db).create(data.to_document(), identity.user_id)
        refresh_recipe_count(db, identity.user_id)
        logger.info(f"recipe_created recipe_id={recipe['_id']} author={identity.user_id}")
        return recipe_to_public(recipe)

    @staticmethod
    def update_recipe(
        db: Database, identity: Identity, recipe_id: Any, data: RecipeUpdate
    ) -> Dict[str, Any]:
        recipe = RecipeService._get_owned(db, identity, recipe_id, "update")
        changes = data.to_changes()
        if not changes:
            return recipe_to_public(recipe)

        updated = RecipeRepository(db).update_by_id(recipe["_id"], changes)
        if updated is None:
            raise NotFoundError("Recipe not found")
        logger.info(
            f"recipe_updated recipe_id={recipe['_id']} fields={','.join(sorted(changes))}"
        )
        return recipe_to_public(updated)

    @staticmethod
    def delete_recipe(db: Database, identity: Identity, recipe_id: Any) -> Dict[str, Any]:
        """
        Delete a recipe and its reviews.

        Runs as explicit steps: reviews first, then the recipe, then the
        author's recipe count. If the recipe delete fails after its reviews are
        gone, the rating cache is reset to match and the error propagates.
        """
        recipe = RecipeService._get_owned(db, identity, recipe_id, "delete")
        rid = recipe["_id"]

        reviews_deleted = ReviewRepository(db).delete_for_recipe(rid)
        logger.info(f"recipe_delete_reviews recipe_id={rid} deleted={reviews_deleted}")

        try:
            deleted = RecipeRepository(db).delete_by_id(rid)
        except Exception:
            logger.error(
                f"recipe_delete_incomplete recipe_id={rid} step=delete_recipe "
                f"reviews_deleted={reviews_deleted}"
            )
            RatingService.recompute(db, rid)
            raise

        if not deleted:
            logger.warning(f"recipe_already_deleted recipe_id={rid}")

        refresh_recipe_count(db, recipe["author"])
        logger.info(f"recipe_deleted recipe_id={rid} by={identity.user_id}")
        return {"id": str(rid), "reviewsDeleted": reviews_deleted}

    @staticmethod
    def toggle_like(db: Database, identity: Identity, recipe_id: Any) -> Dict[str, Any]:
        oid = parse_object_id(recipe_id, "Recipe")
        repo = RecipeRepository(db)
        liked, doc = toggle_membership(
            add=lambda: repo.add_like(oid, identity.user_id),
            remove=lambda: repo.remove_like(oid, identity.user_id),
            exists=lambda: repo.exists(oid),
            resource="Recipe",
        )
        logger.info(f"recipe_like_toggled recipe_id={oid} user_id={identity.user_id} liked={liked}")
        return {"isLiked": liked, "likesCount": doc.get("likesCount", 0)}

    @staticmethod
    def toggle_favorite(db: Database, identity: Identity, recipe_id: Any) -> Dict[str, Any]:
        oid = parse_object_id(recipe_id, "Recipe")
        if not RecipeRepository(db).exists(oid):
            raise NotFoundError("Recipe not found")

        users = UserRepository(db)
        favorited, _ = toggle_membership(
            add=lambda: users.add_favorite(identity.user_id, oid),
            remove=lambda: users.remove_favorite(identity.user_id, oid),
            exists=lambda: users.exists(identity.user_id),
            resource="User",
        )
        logger.info(
            f"recipe_favorite_toggled recipe_id={oid} user_id={identity.user_id} favorited={favorited}"
        )
        return {"isFavorited": favorited}

    @staticmethod
    def set_image(
        db: Database,
        identity: Identity,
        recipe_id: Any,
        stream: BinaryIO,
        content_type: Optional[str],
        filename: Optional[str] = None,
    ) -> Dict[str, Any]:
        recipe = RecipeService._get_owned(db, identity, recipe_id, "update")
        stored = media_storage.save_image(
            stream, content_type, filename, prefix=f"photo_{recipe['_id']}"
        )
        updated = RecipeRepository(db).set_image(recipe["_id"], stored)
        if updated is None:
            raise NotFoundError("Recipe not found")
        return recipe_to_public(updated)

    @staticmethod
    def list_by_ids(db: Database, recipe_ids: Iterable[ObjectId]) -> List[Dict[str, Any]]:
        """Recipes in the given order with author summaries; missing ids are skipped"""
        ordered = list(recipe_ids)
        found = RecipeRepository(db).get_by_ids(ordered)
        docs = [found[rid] for rid in ordered if rid in found]
        attach_users(db, docs)
        return [recipe_to_public(doc) for doc in docs]
