"""
Shared plumbing for the project and blog repositories.

Public reads go through ``cached`` accessors on the subclasses; admin reads and
all writes hit the store directly. The public write methods on the subclasses
call ``invalidate`` once the store accepted the change.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Optional

from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from ..cache import ContentCache
from ..errors import DocumentError, NotFoundError, OperationFailedError
from ..models.documents import object_id
from ..utils import utcnow

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", -1)]
RECENTLY_UPDATED = [("updatedAt", -1)]


@contextmanager
def store_errors(message: str):
    """Re-raise store failures as OperationFailedError carrying ``message``."""
    try:
        yield
    except PyMongoError as e:
        logger.exception(message)
        raise OperationFailedError(message) from e


class ContentRepository:
    collection_name: str = ""
    tag: str = ""
    label: str = "item"
    from_document: Callable[[dict], Any]  # staticmethod on subclasses

    def __init__(self, db, cache: ContentCache):
        self.db = db
        self.collection = db[self.collection_name]
        self.cache = cache

    # ---------- read helpers ----------

    def _entities(self, docs: list[dict]) -> list:
        items = []
        for doc in docs:
            try:
                items.append(self.from_document(doc))
            except DocumentError as e:
                logger.warning("Skipping %s: %s", self.label, e)
        return items

    def _entity_or_none(self, doc: Optional[dict]):
        if not doc:
            return None
        try:
            return self.from_document(doc)
        except DocumentError as e:
            logger.warning("Unreadable %s: %s", self.label, e)
            return None

    async def _find(self, query: dict, sort=None, limit: int = 0) -> list:
        cursor = self.collection.find(query, sort=sort, limit=limit)
        return self._entities(await cursor.to_list(length=None))

    async def _find_one(self, query: dict):
        return self._entity_or_none(await self.collection.find_one(query))

    async def _slugs(self) -> list[str]:
        cursor = self.collection.find({"published": True}, {"slug": 1})
        docs = await cursor.to_list(length=None)
        return [doc["slug"] for doc in docs if doc.get("slug")]

    async def _list_admin(self) -> list:
        try:
            return await self._find({}, sort=RECENTLY_UPDATED)
        except PyMongoError:
            logger.exception("[ADMIN] Error fetching %s list", self.label)
            return []

    async def _get_admin(self, item_id: str):
        oid = object_id(item_id)
        if oid is None:
            return None
        try:
            return await self._find_one({"_id": oid})
        except PyMongoError:
            logger.exception("[ADMIN] Error fetching %s %s", self.label, item_id)
            return None

    # ---------- write helpers ----------

    def _oid_or_missing(self, item_id: str):
        oid = object_id(item_id)
        if oid is None:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        return oid

    async def _insert(self, doc: dict) -> str:
        now = utcnow()
        doc.update(createdAt=now, updatedAt=now)
        with store_errors(f"Failed to create {self.label}"):
            result = await self.collection.insert_one(doc)
        item_id = str(result.inserted_id)
        logger.info("[ADMIN] Created %s %s", self.label, item_id)
        return item_id

    async def _update(self, item_id: str, changes: dict) -> None:
        oid = self._oid_or_missing(item_id)
        changes = {**changes, "updatedAt": utcnow()}
        with store_errors(f"Failed to update {self.label}"):
            result = await self.collection.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        logger.info("[ADMIN] Updated %s %s", self.label, item_id)

    async def _delete(self, item_id: str) -> None:
        oid = self._oid_or_missing(item_id)
        with store_errors(f"Failed to delete {self.label}"):
            result = await self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        logger.info("[ADMIN] Deleted %s %s", self.label, item_id)

    async def _toggle(self, item_id: str, flag: str) -> bool:
        """Flip a boolean flag and return its new value."""
        oid = self._oid_or_missing(item_id)
        with store_errors(f"Failed to toggle {self.label} {flag}"):
            doc = await self.collection.find_one({"_id": oid}, {flag: 1})
            if doc is None:
                raise NotFoundError(f"{self.label.capitalize()} not found")
            value = not doc.get(flag, False)
            await self.collection.update_one(
                {"_id": oid}, {"$set": {flag: value, "updatedAt": utcnow()}}
            )
        logger.info("[ADMIN] %s %s %s=%s", self.label.capitalize(), item_id, flag, value)
        return value

    async def invalidate(self) -> None:
        """Drop this repository's cache tag; never fails the caller."""
        try:
            await self.cache.invalidate_tag(self.tag)
        except RedisError as e:
            logger.warning("Cache invalidation for %s failed: %s", self.tag, e)
