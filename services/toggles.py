"""Shared toggle flow for set-membership features (likes, favorites, helpful)."""

from typing import Callable, Optional, Tuple

from app.exceptions import ConflictError, NotFoundError
from repositories.base import Document


def toggle_membership(
    add: Callable[[], Optional[Document]],
    remove: Callable[[], Optional[Document]],
    exists: Callable[[], bool],
    resource: str,
) -> Tuple[bool, Document]:
    """
    Flip membership using two conditional atomic updates.

    ``add`` only matches when the value is absent and ``remove`` only when it
    is present, so exactly one of them applies unless the document is gone or
    another request toggled in between.

    Returns:
        (True, doc) when added, (False, doc) when removed

    Raises:
        NotFoundError: the owning document does not exist
        ConflictError: a concurrent toggle won both races
    """
    doc = add()
    if doc is not None:
        return True, doc
    doc = remove()
    if doc is not None:
        return False, doc
    if not exists():
        raise NotFoundError(f"{resource} not found")
    raise ConflictError(
        f"{resource} was modified concurrently, please retry", code="CONCURRENT_UPDATE"
    )
