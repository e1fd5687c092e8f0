from typing import Any, BinaryIO, Dict, List, Mapping, Optional
import logging
import re

from bson import ObjectId
from pymongo.database import Database

from adapters import media_storage
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, UnauthorizedError
from domain.enums import UserRole
from domain.identity import Identity
from domain.mappers import parse_object_id, user_to_public
from repositories import RecipeRepository, UserRepository
from repositories.base import Document
from services.query_builder import build_recipe_query, parse_page_window
from services.recipe_service import RecipeService, run_listing
from services.toggles import toggle_membership

logger = logging.getLogger("recipeshare.user")

FAVORITE_SUMMARY = {"title": 1, "image": 1, "averageRating": 1}
PERSON_SUMMARY = {"name": 1, "avatar": 1}


def _ordered(refs: List[ObjectId], found: Dict[ObjectId, Document]) -> List[Document]:
    return [found[ref] for ref in refs if ref in found]


class UserService:
    """Business logic for user profiles, follows, favorites and avatars"""

    @staticmethod
    def _get_or_404(db: Database, user_id: Any) -> Document:
        oid = parse_object_id(user_id, "User")
        user = UserRepository(db).get_by_id(oid, {"password": 0})
        if not user:
            logger.warning(f"user_not_found user_id={user_id}")
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def resolve_identity(db: Database, user_id: Optional[str]) -> Identity:
        """Turn the caller's user id into an Identity.

        Raises:
            UnauthorizedError: missing, malformed or unknown id
        """
        if not user_id or not ObjectId.is_valid(user_id):
            raise UnauthorizedError()
        user = UserRepository(db).get_by_id(ObjectId(user_id), {"role": 1, "name": 1})
        if not user:
            raise UnauthorizedError()
        return Identity(
            user_id=user["_id"],
            role=user.get("role", UserRole.USER.value),
            name=user.get("name", ""),
        )

    @staticmethod
    def list_users(db: Database, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Newest users first, optionally filtered by name or bio"""
        window = parse_page_window(params, default_limit=settings.default_user_page_size)
        query: Dict[str, Any] = {}
        search = (params.get("search") or "").strip()
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query = {"$or": [{"name": pattern}, {"bio": pattern}]}

        repo = UserRepository(db)
        users = repo.find_page(
            query,
            sort=[("createdAt", -1), ("_id", -1)],
            skip=window.skip,
            limit=window.limit,
            projection={"password": 0},
        )
        total = repo.count(query)
        return {
            "items": [user_to_public(u) for u in users],
            "total": total,
            "page": window.page,
            "limit": window.limit,
            "pages": window.pages_for(total),
        }

    @staticmethod
    def get_user(db: Database, user_id: Any) -> Dict[str, Any]:
        """User profile with favorites and follow lists summarized"""
        user = UserService._get_or_404(db, user_id)
        repo = UserRepository(db)

        favorites = user.get("favorites") or []
        if favorites:
            found = RecipeRepository(db).get_by_ids(favorites, projection=FAVORITE_SUMMARY)
            user["favorites"] = _ordered(favorites, found)

        for key in ("following", "followers"):
            refs = user.get(key) or []
            user[key] = _ordered(refs, repo.get_summaries(refs, PERSON_SUMMARY))

        return user_to_public(user)

    @staticmethod
    def list_user_recipes(db: Database, user_id: Any, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Published recipes by one author, paginated and sortable like the main listing"""
        user = UserService._get_or_404(db, user_id)
        plan = build_recipe_query(
            params,
            base_filter={"author": user["_id"]},
            default_limit=settings.default_user_page_size,
        )
        return run_listing(db, plan)

    @staticmethod
    def toggle_follow(db: Database, identity: Identity, user_id: Any) -> Dict[str, Any]:
        """
        Follow or unfollow another user.

        The caller's ``following`` decides the direction with one conditional
        update; the target's ``followers`` is then mirrored idempotently.
        If the target disappears before the mirror lands, the caller's change
        is undone and the call fails as not found.
        """
        target_id = parse_object_id(user_id, "User")
        repo = UserRepository(db)
        if not repo.exists(target_id):
            raise NotFoundError("User not found")
        if target_id == identity.user_id:
            raise ServiceValidationError("You cannot follow yourself", code="SELF_FOLLOW")

        following, me = toggle_membership(
            add=lambda: repo.add_following(identity.user_id, target_id),
            remove=lambda: repo.remove_following(identity.user_id, target_id),
            exists=lambda: repo.exists(identity.user_id),
            resource="User",
        )
        if following:
            target = repo.add_follower(target_id, identity.user_id)
        else:
            target = repo.remove_follower(target_id, identity.user_id)
        if target is None:
            # Target vanished mid-toggle: undo the caller's side before failing
            if following:
                repo.remove_following(identity.user_id, target_id)
            else:
                repo.add_following(identity.user_id, target_id)
            logger.warning(
                f"follow_rolled_back user_id={identity.user_id} target={target_id} "
                f"following={following}"
            )
            raise NotFoundError("User not found")

        logger.info(
            f"follow_toggled user_id={identity.user_id} target={target_id} following={following}"
        )
        return {
            "isFollowing": following,
            "followersCount": len(target.get("followers") or []),
            "followingCount": len(me.get("following") or []),
        }

    @staticmethod
    def get_favorites(db: Database, identity: Identity) -> List[Dict[str, Any]]:
        user = UserService._get_or_404(db, identity.user_id)
        return RecipeService.list_by_ids(db, user.get("favorites") or [])

    @staticmethod
    def set_avatar(
        db: Database,
        identity: Identity,
        stream: BinaryIO,
        content_type: Optional[str],
        filename: Optional[str] = None,
    ) -> Dict[str, Any]:
        stored = media_storage.save_image(
            stream, content_type, filename, prefix=f"avatar_{identity.user_id}"
        )
        user = UserRepository(db).set_avatar(identity.user_id, stored)
        if user is None:
            raise NotFoundError("User not found")
        return user_to_public(user)

    @staticmethod
    def ensure_default_admin(db: Database) -> bool:
        """
        Create the configured administrator account if it does not exist.

        Idempotent: repeated calls (or several processes starting at once)
        leave exactly one account, and an existing account is never modified.
        """
        created = UserRepository(db).ensure_user(
            settings.default_admin_email,
            {
                "name": settings.default_admin_name,
                "role": UserRole.ADMIN.value,
                "isVerified": True,
            },
        )
        if created:
            logger.info(f"default_admin_created email={settings.default_admin_email}")
        return created
