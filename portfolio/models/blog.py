from typing import Any, List, Optional

from pydantic import BaseModel, ValidationError

from ..config import settings
from ..errors import DocumentError
from .documents import document_id, iso_timestamp


class Author(BaseModel):
    name: str
    email: str
    avatar: Optional[str] = None


class TocEntry(BaseModel):
    id: str
    text: str
    level: int


def default_author() -> Author:
    return Author(name=settings.SITE_AUTHOR_NAME, email=settings.SITE_AUTHOR_EMAIL)


class BlogPost(BaseModel):
    id: str
    title: str = ""
    slug: str = ""
    excerpt: str = ""
    content: str = ""
    author: Author
    featuredImage: Optional[str] = None
    images: List[str] = []
    tags: List[str] = []
    category: str = "General"
    published: bool = False
    featured: bool = False
    readTime: int = 5
    views: int = 0
    likes: int = 0
    createdAt: str
    updatedAt: str
    publishedAt: Optional[str] = None
    metaTitle: Optional[str] = None
    metaDescription: Optional[str] = None
    series: Optional[str] = None
    seriesOrder: Optional[int] = None
    tableOfContents: List[TocEntry] = []


def blog_post_from_document(doc: dict[str, Any]) -> BlogPost:
    """Turn a raw ``blog`` document into a :class:`BlogPost`."""
    data = {k: v for k, v in doc.items() if k != "_id" and v is not None}
    data["id"] = document_id(doc)
    data.setdefault("author", default_author().model_dump())
    data["createdAt"] = iso_timestamp(doc.get("createdAt"), "createdAt")
    data["updatedAt"] = iso_timestamp(doc.get("updatedAt"), "updatedAt")
    data["publishedAt"] = iso_timestamp(doc.get("publishedAt"), "publishedAt", default_now=False)
    try:
        return BlogPost.model_validate(data)
    except ValidationError as exc:
        raise DocumentError(f"Malformed blog post {data['id']}: {exc}") from exc
