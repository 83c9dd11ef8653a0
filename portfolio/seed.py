"""
Load sample projects and blog posts.

    python -m portfolio.seed

Items go through the normal repository write path, so timestamps, publishedAt
and cache invalidation behave exactly as for admin edits. Slugs that already
exist are left alone.
"""

import asyncio
import json
import logging
import os

from .cache import ContentCache
from .config import settings
from .db import create_mongo_client, ensure_indexes
from .redis_client import create_redis_client
from .schemas import BlogPostForm, ProjectForm
from .services.blog import BlogRepository
from .services.projects import ProjectRepository

logger = logging.getLogger(__name__)

DATA_FILE = os.path.join(os.path.dirname(__file__), "seed_data.json")


def load_seed_data(path: str = DATA_FILE) -> dict:
    with open(path, "r") as f:
        return json.load(f)


async def seed_repository(repo, items: list[dict], form_cls, create) -> int:
    """Create each item whose slug is not stored yet; return how many were created."""
    created = 0
    for item in items:
        form = form_cls.model_validate(item)
        if await repo.collection.find_one({"slug": form.slug}, {"_id": 1}):
            logger.info("Skipping existing %s %s", repo.label, form.slug)
            continue
        await create(form)
        created += 1
    return created


async def seed(db, cache: ContentCache, data: dict) -> dict:
    projects = ProjectRepository(db, cache)
    blog = BlogRepository(db, cache)
    return {
        "projects": await seed_repository(
            projects, data.get("projects", []), ProjectForm, projects.create_project
        ),
        "blog": await seed_repository(
            blog, data.get("blog", []), BlogPostForm, blog.create_blog_post
        ),
    }


async def main() -> None:
    client = create_mongo_client()
    redis = create_redis_client()
    try:
        db = client[settings.MONGO_DB_NAME]
        await ensure_indexes(db)
        counts = await seed(db, ContentCache(redis, prefix=settings.CACHE_PREFIX), load_seed_data())
        logger.info("Seeded %d projects and %d blog posts", counts["projects"], counts["blog"])
    finally:
        await redis.aclose()
        await client.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(main())
