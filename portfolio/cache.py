"""
Tagged read-through cache shared by the content accessors.

Entries live in Redis under ``<prefix>:cache:<name>:<args>`` with a TTL. Each
cache tag keeps a Redis set of the entry keys stamped with it, so a write can
drop every entry for an entity kind with one ``invalidate_tag`` call.
"""

import functools
import inspect
import json
import logging
from typing import Any, Callable, Iterable

from pydantic import TypeAdapter, ValidationError
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

# Cache tags
PROJECTS_TAG = "projects"
FEATURED_PROJECTS_TAG = "featured-projects"
BLOG_TAG = "blog"
FEATURED_BLOG_TAG = "featured-blog"

# TTLs in seconds
LIST_TTL = 60
DETAIL_TTL = 300


class ContentCache:
    """Process-wide cache service, built once at startup and owned by the app."""

    def __init__(self, redis_client, prefix: str = "portfolio", tag_ttl: int = 3600):
        self.redis = redis_client
        self.prefix = prefix
        self.tag_ttl = tag_ttl

    def cache_key(self, name: str, args: Any) -> str:
        serialized = json.dumps(args, sort_keys=True, default=str, separators=(",", ":"))
        return f"{self.prefix}:cache:{name}:{serialized}"

    def _tag_key(self, tag: str) -> str:
        return f"{self.prefix}:tag:{tag}"

    async def get(self, key: str) -> str | None:
        return await self.redis.get(key)

    async def set(self, key: str, value: str, ttl: int, tags: Iterable[str]) -> None:
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.setex(key, ttl, value)
            for tag in tags:
                tag_key = self._tag_key(tag)
                pipe.sadd(tag_key, key)
                # the tag set must outlive every entry it points at
                pipe.expire(tag_key, max(ttl, self.tag_ttl))
            await pipe.execute()

    async def invalidate_tag(self, tag: str) -> int:
        """Drop every entry stamped with ``tag``; return how many were removed."""
        tag_key = self._tag_key(tag)
        keys = await self.redis.smembers(tag_key)
        async with self.redis.pipeline(transaction=True) as pipe:
            if keys:
                pipe.delete(*keys)
            pipe.delete(tag_key)
            results = await pipe.execute()
        removed = results[0] if keys else 0
        logger.info("Invalidated cache tag %s (%d entries)", tag, removed)
        return removed

    async def stats(self) -> dict:
        entries = 0
        async for _ in self.redis.scan_iter(match=f"{self.prefix}:cache:*", count=100):
            entries += 1

        tags = {}
        tag_prefix = self._tag_key("")
        async for tag_key in self.redis.scan_iter(match=f"{tag_prefix}*", count=100):
            tags[tag_key[len(tag_prefix):]] = await self.redis.scard(tag_key)

        stats = {"entries": entries, "tags": tags}
        try:
            info = await self.redis.info()
            stats["used_memory"] = info.get("used_memory_human")
            stats["connected_clients"] = info.get("connected_clients")
        except RedisError as e:
            logger.warning("Redis INFO unavailable: %s", e)
        return stats


def cached(
    name: str,
    *,
    tags: Iterable[str],
    ttl: int,
    model: Any,
    fallback: Callable[[], Any],
):
    """Cache a repository coroutine method in ``self.cache``.

    The key is ``name`` plus the bound call arguments. A store failure is
    logged and answered with ``fallback()``, which is never cached. Redis
    failures degrade to an uncached store read.
    """
    adapter = TypeAdapter(model)
    tags = tuple(tags)

    def decorator(fn):
        signature = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(self, *args, **kwargs):
            cache: ContentCache = self.cache
            bound = signature.bind(self, *args, **kwargs)
            bound.apply_defaults()
            call_args = dict(list(bound.arguments.items())[1:])
            key = cache.cache_key(name, call_args)

            try:
                hit = await cache.get(key)
            except RedisError as e:
                logger.warning("Cache read failed for %s: %s", name, e)
                hit = None
            if hit is not None:
                try:
                    return adapter.validate_json(hit)
                except ValidationError as e:
                    # entry written under an older entity shape
                    logger.warning("Discarding unreadable cache entry for %s: %s", name, e)

            try:
                value = await fn(self, *args, **kwargs)
            except PyMongoError:
                logger.exception("Error fetching %s", name)
                return fallback()

            try:
                await cache.set(key, adapter.dump_json(value).decode(), ttl, tags)
            except RedisError as e:
                logger.warning("Cache write failed for %s: %s", name, e)
            return value

        wrapper.cache_name = name
        wrapper.cache_tags = tags
        return wrapper

    return decorator
