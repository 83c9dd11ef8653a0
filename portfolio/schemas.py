from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator
from typing import Dict, List, Literal, Optional

from .models.blog import Author, TocEntry
from .models.project import Metric, ProjectStatus

SLUG_PATTERN = r"^[a-z0-9-]+$"


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _not_null(value):
    # partial updates may omit a field but not clear a required one
    if value is None:
        raise ValueError("This field cannot be empty")
    return value


# ---------- Responses ----------

class ActionResult(BaseModel):
    success: bool
    message: str
    errors: Optional[Dict[str, List[str]]] = None
    id: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RevalidateRequest(BaseModel):
    path: Optional[str] = None
    tag: Optional[str] = None
    secret: Optional[str] = None


# ---------- Projects ----------

class ProjectForm(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    excerpt: str = Field(min_length=10, max_length=200)
    longDescription: Optional[str] = Field(default=None, min_length=50, max_length=5000)
    slug: str = Field(min_length=2, max_length=100, pattern=SLUG_PATTERN)
    category: str = Field(min_length=1)
    status: ProjectStatus
    technologies: List[str] = Field(min_length=1)
    featuredImage: HttpUrl
    images: List[HttpUrl] = []
    githubUrl: Optional[HttpUrl] = None
    liveUrl: Optional[HttpUrl] = None
    demoUrl: Optional[HttpUrl] = None
    challenges: Optional[str] = Field(default=None, max_length=2000)
    solutions: Optional[str] = Field(default=None, max_length=2000)
    learnings: Optional[str] = Field(default=None, max_length=2000)
    metaTitle: Optional[str] = Field(default=None, max_length=60)
    metaDescription: Optional[str] = Field(default=None, max_length=160)
    featured: bool = False
    published: bool = False
    metrics: List[Metric] = []

    @field_validator(
        "githubUrl", "liveUrl", "demoUrl", "longDescription",
        "challenges", "solutions", "learnings", "metaTitle", "metaDescription",
        mode="before",
    )
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=500)
    excerpt: Optional[str] = Field(default=None, min_length=10, max_length=200)
    longDescription: Optional[str] = Field(default=None, min_length=50, max_length=5000)
    slug: Optional[str] = Field(default=None, min_length=2, max_length=100, pattern=SLUG_PATTERN)
    category: Optional[str] = Field(default=None, min_length=1)
    status: Optional[ProjectStatus] = None
    technologies: Optional[List[str]] = Field(default=None, min_length=1)
    featuredImage: Optional[HttpUrl] = None
    images: Optional[List[HttpUrl]] = None
    githubUrl: Optional[HttpUrl] = None
    liveUrl: Optional[HttpUrl] = None
    demoUrl: Optional[HttpUrl] = None
    challenges: Optional[str] = Field(default=None, max_length=2000)
    solutions: Optional[str] = Field(default=None, max_length=2000)
    learnings: Optional[str] = Field(default=None, max_length=2000)
    metaTitle: Optional[str] = Field(default=None, max_length=60)
    metaDescription: Optional[str] = Field(default=None, max_length=160)
    featured: Optional[bool] = None
    published: Optional[bool] = None
    metrics: Optional[List[Metric]] = None

    @field_validator("githubUrl", "liveUrl", "demoUrl", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)

    @field_validator(
        "title", "description", "excerpt", "slug", "category", "status",
        "technologies", "featuredImage", "images", "featured", "published", "metrics",
        mode="before",
    )
    @classmethod
    def required_stays_set(cls, value):
        return _not_null(value)


# ---------- Blog ----------

class BlogPostForm(BaseModel):
    title: str = Field(min_length=2, max_length=200)
    slug: str = Field(min_length=2, max_length=100, pattern=SLUG_PATTERN)
    excerpt: str = Field(min_length=10, max_length=300)
    content: str = Field(min_length=50)
    category: str = Field(default="General", min_length=1)
    tags: List[str] = []
    author: Optional[Author] = None
    featuredImage: Optional[HttpUrl] = None
    images: List[HttpUrl] = []
    readTime: Optional[int] = Field(default=None, ge=1)
    series: Optional[str] = None
    seriesOrder: Optional[int] = Field(default=None, ge=0)
    tableOfContents: List[TocEntry] = []
    metaTitle: Optional[str] = Field(default=None, max_length=60)
    metaDescription: Optional[str] = Field(default=None, max_length=160)
    featured: bool = False
    published: bool = False

    @field_validator("featuredImage", "series", "metaTitle", "metaDescription", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)


class BlogPostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2, max_length=200)
    slug: Optional[str] = Field(default=None, min_length=2, max_length=100, pattern=SLUG_PATTERN)
    excerpt: Optional[str] = Field(default=None, min_length=10, max_length=300)
    content: Optional[str] = Field(default=None, min_length=50)
    category: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    author: Optional[Author] = None
    featuredImage: Optional[HttpUrl] = None
    images: Optional[List[HttpUrl]] = None
    readTime: Optional[int] = Field(default=None, ge=1)
    series: Optional[str] = None
    seriesOrder: Optional[int] = Field(default=None, ge=0)
    tableOfContents: Optional[List[TocEntry]] = None
    metaTitle: Optional[str] = Field(default=None, max_length=60)
    metaDescription: Optional[str] = Field(default=None, max_length=160)
    featured: Optional[bool] = None
    published: Optional[bool] = None

    @field_validator(
        "title", "slug", "excerpt", "content", "category", "tags", "author",
        "images", "readTime", "tableOfContents", "featured", "published",
        mode="before",
    )
    @classmethod
    def required_stays_set(cls, value):
        return _not_null(value)


# ---------- Contact ----------

Budget = Literal["<$5k", "$5k-$15k", "$15k-$50k", "$50k+", "Not sure"]
Timeline = Literal["ASAP", "1-3 months", "3-6 months", "6+ months", "Just exploring"]
ProjectType = Literal[
    "Web Application", "Mobile App", "AI/ML Project", "API Development", "Consulting", "Other"
]


class ContactForm(BaseModel):
    name: str = Field(min_length=2, max_length=100, pattern=r"^[a-zA-Z\s\-'\.]+$")
    email: EmailStr
    company: Optional[str] = Field(default=None, max_length=100)
    subject: str = Field(min_length=5, max_length=200)
    message: str = Field(min_length=10, max_length=5000)
    budget: Optional[Budget] = None
    timeline: Optional[Timeline] = None
    projectType: Optional[ProjectType] = None
    recaptchaToken: Optional[str] = None

    @field_validator("company", "budget", "timeline", "projectType", "recaptchaToken", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        return _blank_to_none(value)
