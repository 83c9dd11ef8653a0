import logging

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from .config import settings

logger = logging.getLogger(__name__)

# Collections
PROJECTS = "projects"
BLOG = "blog"
CONTACT_SUBMISSIONS = "contactSubmissions"

INDEXES = {
    PROJECTS: [
        [("published", ASCENDING), ("createdAt", DESCENDING)],
        [("published", ASCENDING), ("featured", ASCENDING), ("createdAt", DESCENDING)],
        [("published", ASCENDING), ("category", ASCENDING), ("createdAt", DESCENDING)],
    ],
    BLOG: [
        [("published", ASCENDING), ("publishedAt", DESCENDING)],
        [("published", ASCENDING), ("featured", ASCENDING), ("publishedAt", DESCENDING)],
        [("published", ASCENDING), ("category", ASCENDING), ("publishedAt", DESCENDING)],
        [("published", ASCENDING), ("tags", ASCENDING), ("publishedAt", DESCENDING)],
        [("published", ASCENDING), ("views", DESCENDING)],
    ],
    CONTACT_SUBMISSIONS: [
        [("email", ASCENDING), ("createdAt", ASCENDING)],
        [("ipAddress", ASCENDING), ("createdAt", ASCENDING)],
    ],
}


def create_mongo_client() -> AsyncMongoClient:
    return AsyncMongoClient(settings.MONGO_URI)


async def ensure_indexes(db) -> None:
    """Create the compound indexes the public queries rely on."""
    for collection, indexes in INDEXES.items():
        for keys in indexes:
            try:
                await db[collection].create_index(keys)
            except PyMongoError as e:
                logger.error("Could not create index %s on %s: %s", keys, collection, e)


def get_db(request: Request):
    return request.app.state.db
