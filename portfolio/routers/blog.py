"""
Public blog routes.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..cache import DETAIL_TTL, LIST_TTL
from ..dependencies import get_blog_repository
from ..models.blog import BlogPost
from ..schemas import ActionResult
from ..services.blog import BlogRepository

router = APIRouter(prefix="/blog", tags=["blog"])


def _cache_for(response: Response, seconds: int) -> None:
    response.headers["Cache-Control"] = f"public, max-age={seconds}"


@router.get("", response_model=list[BlogPost])
async def list_posts(
    response: Response,
    category: str | None = None,
    tag: str | None = None,
    q: str | None = None,
    repo: BlogRepository = Depends(get_blog_repository),
):
    """Published posts: search, tag, category, or everything (in that precedence)."""
    if q and q.strip():
        response.headers["Cache-Control"] = "no-store"
        return await repo.search_blog_posts(q.strip())

    _cache_for(response, LIST_TTL)
    if tag:
        return await repo.get_blog_posts_by_tag(tag.strip())
    if category:
        return await repo.get_blog_posts_by_category(category.strip())
    return await repo.get_all_blog_posts()


@router.get("/featured", response_model=list[BlogPost])
async def featured_posts(
    response: Response,
    limit: int = Query(default=3, ge=1, le=20),
    repo: BlogRepository = Depends(get_blog_repository),
):
    _cache_for(response, LIST_TTL)
    return await repo.get_featured_blog_posts(limit)


@router.get("/popular", response_model=list[BlogPost])
async def popular_posts(
    response: Response,
    limit: int = Query(default=5, ge=1, le=20),
    repo: BlogRepository = Depends(get_blog_repository),
):
    _cache_for(response, DETAIL_TTL)
    return await repo.get_popular_blog_posts(limit)


@router.get("/recent", response_model=list[BlogPost])
async def recent_posts(
    response: Response,
    limit: int = Query(default=5, ge=1, le=20),
    repo: BlogRepository = Depends(get_blog_repository),
):
    _cache_for(response, LIST_TTL)
    return await repo.get_recent_blog_posts(limit)


@router.get("/slugs", response_model=list[str])
async def post_slugs(response: Response, repo: BlogRepository = Depends(get_blog_repository)):
    _cache_for(response, DETAIL_TTL)
    return await repo.get_all_blog_post_slugs()


@router.get("/{slug}", response_model=BlogPost)
async def get_post(slug: str, response: Response, repo: BlogRepository = Depends(get_blog_repository)):
    """Single published post. Each read counts as a view."""
    post = await repo.get_blog_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    await repo.increment_blog_post_views(post.id)
    _cache_for(response, DETAIL_TTL)
    return post


@router.get("/{slug}/related", response_model=list[BlogPost])
async def related_posts(
    slug: str,
    response: Response,
    limit: int = Query(default=3, ge=1, le=12),
    repo: BlogRepository = Depends(get_blog_repository),
):
    post = await repo.get_blog_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    _cache_for(response, DETAIL_TTL)
    return await repo.get_related_blog_posts(post.id, post.tags, post.category, limit)


@router.post("/{post_id}/like", response_model=ActionResult, response_model_exclude_none=True)
async def like_post(post_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    await repo.increment_blog_post_likes(post_id)
    return ActionResult(success=True, message="Thanks!", id=post_id)
