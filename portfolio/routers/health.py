import logging

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from ..cache import ContentCache
from ..db import get_db
from ..dependencies import get_cache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/")
def root():
    return {"status": "ok"}


@router.get("/health")
async def health(db=Depends(get_db), cache: ContentCache = Depends(get_cache)):
    """Report whether the document store and the cache answer."""
    status = {"status": "ok", "database": "connected", "cache": "connected"}
    try:
        await db.command("ping")
    except PyMongoError as e:
        logger.error("Database ping failed: %s", e)
        status.update(status="degraded", database="unavailable")
    try:
        await cache.redis.ping()
    except RedisError as e:
        logger.error("Cache ping failed: %s", e)
        status.update(status="degraded", cache="unavailable")
    return status
