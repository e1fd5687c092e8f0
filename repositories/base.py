"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepository:
    """
    Base repository providing common operations over one MongoDB collection.
    All repositories should inherit from this class and set ``collection_name``.
    """

    collection_name: str = ""

    def __init__(self, db: Database):
        self.db = db
        self.collection = db[self.collection_name]

    def get_by_id(
        self, doc_id: ObjectId, projection: Optional[Mapping[str, Any]] = None
    ) -> Optional[Document]:
        """Get a document by its ``_id``, or None"""
        return self.collection.find_one({"_id": doc_id}, projection)

    def exists(self, doc_id: ObjectId) -> bool:
        """Check if a document exists"""
        return self.collection.count_documents({"_id": doc_id}, limit=1) > 0

    def find_page(
        self,
        filter_query: Mapping[str, Any],
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> List[Document]:
        """Find matching documents in sort order, windowed by skip/limit"""
        cursor = self.collection.find(filter_query, projection)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def count(self, filter_query: Mapping[str, Any]) -> int:
        """Count matching documents"""
        return self.collection.count_documents(filter_query)

    def get_by_ids(
        self, doc_ids: Iterable[ObjectId], projection: Optional[Mapping[str, Any]] = None
    ) -> Dict[ObjectId, Document]:
        """Fetch several documents at once, keyed by ``_id``"""
        ids = list(dict.fromkeys(doc_ids))
        if not ids:
            return {}
        docs = self.collection.find({"_id": {"$in": ids}}, projection)
        return {doc["_id"]: doc for doc in docs}

    def insert(self, doc: Document) -> Document:
        """Insert a new document stamped with createdAt/updatedAt"""
        now = utcnow()
        doc = dict(doc)
        doc.setdefault("createdAt", now)
        doc.setdefault("updatedAt", now)
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update_by_id(
        self, doc_id: ObjectId, changes: Mapping[str, Any]
    ) -> Optional[Document]:
        """Atomically ``$set`` fields and return the updated document, or None"""
        return self.collection.find_one_and_update(
            {"_id": doc_id},
            {"$set": {**changes, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def delete_by_id(self, doc_id: ObjectId) -> bool:
        """Delete a document by ``_id``"""
        return self.collection.delete_one({"_id": doc_id}).deleted_count == 1

    # Set membership with a cached size counter. Both operations are a single
    # conditional update so the array and its counter never diverge.

    def add_to_set(
        self,
        doc_id: ObjectId,
        field: str,
        value: Any,
        counter: Optional[str] = None,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Document]:
        """Add ``value`` if absent. Returns None when absent doc or already a member."""
        update: Dict[str, Any] = {"$addToSet": {field: value}}
        if counter:
            update["$inc"] = {counter: 1}
        return self.collection.find_one_and_update(
            {"_id": doc_id, field: {"$ne": value}},
            update,
            projection=projection,
            return_document=ReturnDocument.AFTER,
        )

    def pull_from_set(
        self,
        doc_id: ObjectId,
        field: str,
        value: Any,
        counter: Optional[str] = None,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Document]:
        """Remove ``value`` if present. Returns None when absent doc or not a member."""
        update: Dict[str, Any] = {"$pull": {field: value}}
        if counter:
            update["$inc"] = {counter: -1}
        return self.collection.find_one_and_update(
            {"_id": doc_id, field: value},
            update,
            projection=projection,
            return_document=ReturnDocument.AFTER,
        )
