"""
On-demand revalidation and cache inspection.

A deploy hook or the admin UI calls ``/api/revalidate`` after content changes
made outside the write path (or to force a refresh).
"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from ..cache import (
    BLOG_TAG,
    FEATURED_BLOG_TAG,
    FEATURED_PROJECTS_TAG,
    PROJECTS_TAG,
    ContentCache,
)
from ..config import settings
from ..dependencies import get_cache
from ..schemas import RevalidateRequest
from ..services.auth_service import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cache Management"])

HOME_TAGS = [PROJECTS_TAG, FEATURED_PROJECTS_TAG, BLOG_TAG, FEATURED_BLOG_TAG]
DEFAULT_TAGS = [PROJECTS_TAG, FEATURED_PROJECTS_TAG]


def tags_for_path(path: str) -> list[str]:
    """Cache tags backing the page rendered at ``path``."""
    path = "/" + path.strip().strip("/")
    if path == "/":
        return list(HOME_TAGS)
    if path == "/projects" or path.startswith("/projects/"):
        return [PROJECTS_TAG]
    if path == "/blog" or path.startswith("/blog/"):
        return [BLOG_TAG]
    return []


def check_secret(secret: str | None) -> None:
    if settings.REVALIDATION_SECRET and secret != settings.REVALIDATION_SECRET:
        raise HTTPException(status_code=401, detail="Invalid secret")


async def revalidate(cache: ContentCache, path: str | None, tag: str | None):
    if tag:
        tags, message = [tag], f"Tag {tag} revalidated"
    elif path:
        tags, message = tags_for_path(path), f"Path {path} revalidated"
    else:
        tags, message = list(DEFAULT_TAGS), "All project pages revalidated"

    try:
        for t in tags:
            await cache.invalidate_tag(t)
    except RedisError as e:
        logger.error("Revalidation failed for %s: %s", tags, e)
        return JSONResponse(status_code=500, content={"message": "Error revalidating", "error": str(e)})

    logger.info("Revalidated %s", tags)
    return {"revalidated": True, "now": int(time.time() * 1000), "message": message, "tags": tags}


@router.post("/revalidate")
async def revalidate_post(body: RevalidateRequest, cache: ContentCache = Depends(get_cache)):
    check_secret(body.secret)
    return await revalidate(cache, body.path, body.tag)


@router.get("/revalidate")
async def revalidate_get(
    path: str | None = None,
    tag: str | None = None,
    secret: str | None = Query(default=None),
    cache: ContentCache = Depends(get_cache),
):
    check_secret(secret)
    return await revalidate(cache, path, tag)


@router.get("/cache/stats", dependencies=[Depends(get_current_admin)])
async def cache_stats(cache: ContentCache = Depends(get_cache)):
    """Entry and tag counts plus Redis memory info."""
    try:
        return await cache.stats()
    except RedisError as e:
        logger.error("Cache stats unavailable: %s", e)
        return JSONResponse(status_code=503, content={"message": "Cache unavailable", "error": str(e)})
