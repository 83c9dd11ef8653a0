"""
Blog content: cached public accessors, uncached admin reads and search, the
admin write path, and engagement counters.
"""

import logging
from typing import Optional

from pymongo.errors import PyMongoError

from ..cache import BLOG_TAG, DETAIL_TTL, FEATURED_BLOG_TAG, LIST_TTL, cached
from ..db import BLOG
from ..models.blog import BlogPost, blog_post_from_document, default_author
from ..models.documents import object_id
from ..schemas import BlogPostForm, BlogPostUpdate
from ..utils import estimate_read_time, utcnow
from .relevance import rank_related
from .repository import ContentRepository, store_errors

logger = logging.getLogger(__name__)

LATEST_FIRST = [("publishedAt", -1)]
MOST_VIEWED = [("views", -1)]
ALL_CATEGORIES = "All"


class BlogRepository(ContentRepository):
    collection_name = BLOG
    tag = BLOG_TAG
    label = "blog post"
    from_document = staticmethod(blog_post_from_document)

    # ---------- public, cached ----------

    @cached("all-blog-posts", tags=[BLOG_TAG], ttl=LIST_TTL, model=list[BlogPost], fallback=list)
    async def get_all_blog_posts(self) -> list[BlogPost]:
        return await self._find({"published": True}, sort=LATEST_FIRST)

    @cached(
        "featured-blog-posts",
        tags=[BLOG_TAG, FEATURED_BLOG_TAG],
        ttl=LIST_TTL,
        model=list[BlogPost],
        fallback=list,
    )
    async def get_featured_blog_posts(self, limit: int = 3) -> list[BlogPost]:
        return await self._find({"published": True, "featured": True}, sort=LATEST_FIRST, limit=limit)

    @cached(
        "blog-post-by-slug",
        tags=[BLOG_TAG],
        ttl=DETAIL_TTL,
        model=Optional[BlogPost],
        fallback=lambda: None,
    )
    async def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return await self._find_one({"slug": slug, "published": True})

    @cached("blog-posts-by-category", tags=[BLOG_TAG], ttl=LIST_TTL, model=list[BlogPost], fallback=list)
    async def get_blog_posts_by_category(self, category: str) -> list[BlogPost]:
        query = {"published": True}
        if category != ALL_CATEGORIES:
            query["category"] = category
        return await self._find(query, sort=LATEST_FIRST)

    @cached("blog-posts-by-tag", tags=[BLOG_TAG], ttl=LIST_TTL, model=list[BlogPost], fallback=list)
    async def get_blog_posts_by_tag(self, tag: str) -> list[BlogPost]:
        # equality on an array field matches any element
        return await self._find({"published": True, "tags": tag}, sort=LATEST_FIRST)

    @cached("related-blog-posts", tags=[BLOG_TAG], ttl=DETAIL_TTL, model=list[BlogPost], fallback=list)
    async def get_related_blog_posts(
        self,
        current_post_id: str,
        tags: list[str],
        category: str,
        limit: int = 3,
    ) -> list[BlogPost]:
        """Same-category posts sharing at least one tag, best overlap first."""
        pool = await self._find({"published": True, "category": category}, sort=LATEST_FIRST)
        candidates = [p for p in pool if p.id != current_post_id]
        return rank_related(candidates, tags, lambda p: p.tags, limit, keep_zero=False)

    @cached("blog-post-slugs", tags=[BLOG_TAG], ttl=DETAIL_TTL, model=list[str], fallback=list)
    async def get_all_blog_post_slugs(self) -> list[str]:
        return await self._slugs()

    @cached("popular-blog-posts", tags=[BLOG_TAG], ttl=DETAIL_TTL, model=list[BlogPost], fallback=list)
    async def get_popular_blog_posts(self, limit: int = 5) -> list[BlogPost]:
        return await self._find({"published": True}, sort=MOST_VIEWED, limit=limit)

    @cached("recent-blog-posts", tags=[BLOG_TAG], ttl=LIST_TTL, model=list[BlogPost], fallback=list)
    async def get_recent_blog_posts(self, limit: int = 5) -> list[BlogPost]:
        return await self._find({"published": True}, sort=LATEST_FIRST, limit=limit)

    async def search_blog_posts(self, query: str) -> list[BlogPost]:
        """Published posts whose title, excerpt or tags contain any query term.

        Matching happens in process over the published set; not cached.
        """
        terms = query.lower().split()
        if not terms:
            return []
        try:
            posts = await self._find({"published": True}, sort=LATEST_FIRST)
        except PyMongoError:
            logger.exception("Error searching blog posts")
            return []

        def searchable(post: BlogPost) -> str:
            return f"{post.title} {post.excerpt} {' '.join(post.tags)}".lower()

        return [p for p in posts if any(term in searchable(p) for term in terms)]

    # ---------- admin, uncached ----------

    async def get_all_blog_posts_admin(self) -> list[BlogPost]:
        return await self._list_admin()

    async def get_blog_post_by_id_admin(self, post_id: str) -> Optional[BlogPost]:
        return await self._get_admin(post_id)

    # ---------- mutations ----------

    async def _stamp_published_at(self, post_id: str) -> None:
        """Set publishedAt the first time a post goes live; never overwrite it."""
        oid = self._oid_or_missing(post_id)
        with store_errors("Failed to update blog post"):
            await self.collection.update_one(
                {"_id": oid, "published": True, "publishedAt": None},
                {"$set": {"publishedAt": utcnow()}},
            )

    async def create_blog_post(self, form: BlogPostForm) -> str:
        doc = form.model_dump(mode="json")
        if doc.get("author") is None:
            doc["author"] = default_author().model_dump()
        if doc.get("readTime") is None:
            doc["readTime"] = estimate_read_time(form.content)
        doc.update(views=0, likes=0, publishedAt=utcnow() if form.published else None)
        post_id = await self._insert(doc)
        await self.invalidate()
        return post_id

    async def update_blog_post(self, post_id: str, fields: BlogPostUpdate) -> None:
        changes = fields.model_dump(mode="json", exclude_unset=True)
        await self._update(post_id, changes)
        if changes.get("published"):
            await self._stamp_published_at(post_id)
        await self.invalidate()

    async def delete_blog_post(self, post_id: str) -> None:
        await self._delete(post_id)
        await self.invalidate()

    async def toggle_blog_post_published(self, post_id: str) -> bool:
        published = await self._toggle(post_id, "published")
        if published:
            await self._stamp_published_at(post_id)
        await self.invalidate()
        return published

    async def toggle_blog_post_featured(self, post_id: str) -> bool:
        featured = await self._toggle(post_id, "featured")
        await self.invalidate()
        return featured

    # ---------- counters ----------

    async def _increment(self, post_id: str, field: str) -> None:
        oid = object_id(post_id)
        if oid is None:
            logger.warning("Cannot count %s for malformed id %r", field, post_id)
            return
        try:
            result = await self.collection.update_one({"_id": oid}, {"$inc": {field: 1}})
        except PyMongoError:
            logger.exception("Error incrementing %s for blog post %s", field, post_id)
            return
        if result.matched_count == 0:
            logger.warning("Cannot count %s for missing blog post %s", field, post_id)

    async def increment_blog_post_views(self, post_id: str) -> None:
        await self._increment(post_id, "views")

    async def increment_blog_post_likes(self, post_id: str) -> None:
        await self._increment(post_id, "likes")
