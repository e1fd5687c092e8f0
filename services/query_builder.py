"""
Recipe listing query builder.

Turns untrusted listing parameters (``search``, ``category``, ``cuisine``,
``difficulty``, ``maxPrepTime``, ``minRating``, ``page``, ``limit``, ``sort``)
into a MongoDB filter, a sort order and a skip/limit window.

Malformed numeric values are ignored rather than rejected: a bad
``maxPrepTime`` or ``minRating`` drops that predicate, and a bad ``page`` or
``limit`` falls back to the default. Only published recipes are ever matched.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.config import settings
from domain.enums import RecipeSort

logger = logging.getLogger("recipeshare.query")

# Largest integer BSON can encode; MongoDB rejects anything wider
BSON_INT64_MAX = 2**63 - 1

SORT_FIELDS: Dict[RecipeSort, List[Tuple[str, int]]] = {
    RecipeSort.NEWEST: [("createdAt", -1)],
    RecipeSort.OLDEST: [("createdAt", 1)],
    RecipeSort.RATING: [("averageRating", -1)],
    RecipeSort.POPULAR: [("likesCount", -1)],
}


@dataclass(frozen=True)
class PageWindow:
    """A validated pagination window"""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def pages_for(self, total: int) -> int:
        return math.ceil(total / self.limit)


@dataclass(frozen=True)
class RecipeQueryPlan:
    """Everything needed to run one recipe listing query"""

    filter: Dict[str, Any]
    sort: List[Tuple[str, int]]
    window: PageWindow
    sort_key: RecipeSort = RecipeSort.NEWEST
    ignored: List[str] = field(default_factory=list)

    @property
    def skip(self) -> int:
        return self.window.skip

    @property
    def limit(self) -> int:
        return self.window.limit

    @property
    def page(self) -> int:
        return self.window.page


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer parameter; None when absent or malformed"""
    text = _text(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_float(value: Any) -> Optional[float]:
    """Parse a finite float parameter; None when absent or malformed"""
    text = _text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_page_window(
    params: Mapping[str, Any],
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> PageWindow:
    """Build a pagination window, clamping page to >= 1 and limit to [1, max]"""
    default_limit = default_limit or settings.default_page_size
    max_limit = max_limit or settings.max_page_size

    page = parse_int(params.get("page"))
    if page is None or page < 1:
        page = 1

    limit = parse_int(params.get("limit"))
    if limit is None or limit < 1:
        limit = default_limit
    limit = min(limit, max_limit)

    # Any page this deep is past the end; keep skip encodable
    page = min(page, BSON_INT64_MAX // limit + 1)

    return PageWindow(page=page, limit=limit)


def parse_sort(value: Any) -> RecipeSort:
    """Map the ``sort`` parameter to a known ordering, defaulting to newest"""
    text = _text(value)
    if text is None:
        return RecipeSort.NEWEST
    try:
        return RecipeSort(text.lower())
    except ValueError:
        logger.debug(f"unknown_sort value={text!r} fallback=newest")
        return RecipeSort.NEWEST


def build_recipe_query(
    params: Mapping[str, Any],
    base_filter: Optional[Mapping[str, Any]] = None,
    default_limit: Optional[int] = None,
) -> RecipeQueryPlan:
    """
    Build the query plan for a recipe listing.

    Args:
        params: raw request parameters, typically ``request.query_params``
        base_filter: extra fixed predicates, e.g. ``{"author": user_id}``
        default_limit: page size when ``limit`` is absent or invalid

    Returns:
        RecipeQueryPlan with filter, sort (``_id`` as final tie-breaker) and window
    """
    query: Dict[str, Any] = dict(base_filter or {})
    query["isPublished"] = True
    ignored: List[str] = []

    search = _text(params.get("search"))
    if search:
        query["$text"] = {"$search": search}

    for key in ("category", "cuisine", "difficulty"):
        value = _text(params.get(key))
        if value:
            query[key] = value

    if _text(params.get("maxPrepTime")) is not None:
        max_prep = parse_int(params.get("maxPrepTime"))
        if max_prep is None or abs(max_prep) > BSON_INT64_MAX:
            ignored.append("maxPrepTime")
        else:
            query["prepTime"] = {"$lte": max_prep}

    if _text(params.get("minRating")) is not None:
        min_rating = parse_float(params.get("minRating"))
        if min_rating is None:
            ignored.append("minRating")
        else:
            query["averageRating"] = {"$gte": min_rating}

    if ignored:
        logger.info(f"recipe_query_ignored_params params={','.join(ignored)}")

    sort_key = parse_sort(params.get("sort"))
    direction = SORT_FIELDS[sort_key][-1][1]
    sort = SORT_FIELDS[sort_key] + [("_id", direction)]

    return RecipeQueryPlan(
        filter=query,
        sort=sort,
        window=parse_page_window(params, default_limit=default_limit),
        sort_key=sort_key,
        ignored=ignored,
    )
